from django.core.exceptions import ImproperlyConfigured
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler


def exception_handler(exc, context):
    """
    Custom exception handler for DRF that returns consistent error format.
    """
    response = drf_exception_handler(exc, context)

    if response:
        response.data = format_error(
            code=getattr(exc, "default_code", "error"),
            message=str(exc),
            details=(
                response.data
                if isinstance(response.data, dict)
                else {"detail": response.data}
            ),
        )

    return response


def format_error(code: str, message: str, details=None):
    return {
        "error": {
            "code": str(code).upper(),
            "message": message,
            "details": details if details is not None else {},
        }
    }


class AuthError(APIException):
    """Base class for passkey ceremony failures."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Authentication failed"
    default_code = "auth_error"


class ValidationError(AuthError):
    """Raised on bad or missing input (email, display name, duplicate credential)."""
    default_detail = "Invalid input"
    default_code = "validation_error"


class NotFoundError(AuthError):
    """Raised when the user or credential does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class NoCredentialsError(AuthError):
    """Raised when a user tries to authenticate before registering any passkey."""
    default_detail = "No passkeys registered for this user"
    default_code = "no_credentials"


class ChallengeExpiredError(AuthError):
    """Raised when there is no live challenge for the user, or it has expired."""
    default_detail = "No challenge in progress or challenge expired"
    default_code = "challenge_expired"


class AssertionVerificationError(AuthError):
    """Raised when the WebAuthn response fails cryptographic verification."""
    default_detail = "Passkey verification failed"
    default_code = "verification_failed"


class CounterRegressionError(AuthError):
    """Raised when the signature counter did not increase (possible cloned authenticator)"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Signature counter did not increase"
    default_code = "counter_regression"

    def __init__(self, stored_counter, received_counter):
        self.stored_counter = stored_counter
        self.received_counter = received_counter
        super().__init__(
            f"Signature counter did not increase (stored {stored_counter}, received {received_counter})"
        )


class ConfigurationError(ImproperlyConfigured):
    """Raised at startup when the deployment cannot run safely (e.g. no signing secret)."""
