from .exceptions import (
    exception_handler,
    format_error,
    AuthError,
    ValidationError,
    NotFoundError,
    NoCredentialsError,
    ChallengeExpiredError,
    AssertionVerificationError,
    CounterRegressionError,
    ConfigurationError,
)

__all__ = [
    "exception_handler",
    "format_error",
    "AuthError",
    "ValidationError",
    "NotFoundError",
    "NoCredentialsError",
    "ChallengeExpiredError",
    "AssertionVerificationError",
    "CounterRegressionError",
    "ConfigurationError",
]
