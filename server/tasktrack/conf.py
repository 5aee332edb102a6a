"""Authentication configuration resolved once at process startup.

`AuthConfig` is built by `TasktrackConfig.ready()` and handed by reference to
the ceremony engine, the session issuer/verifiers and the request gate. Nothing
else in the package reads these values from the environment or from
`django.conf.settings` at call time.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import urlparse

from tasktrack.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Only ever used when DEBUG is on.
FALLBACK_DEV_SECRET = "tasktrack-insecure-development-session-secret"


@dataclass(frozen=True)
class AuthConfig:
    rp_name: str
    rp_origin: str
    rp_id: str
    session_secret: str
    session_lifetime: timedelta
    cookie_name: str
    secure_cookies: bool
    login_url: str
    protected_paths: tuple

    @property
    def session_ttl_seconds(self) -> int:
        return int(self.session_lifetime.total_seconds())

    @classmethod
    def from_settings(cls, settings) -> "AuthConfig":
        debug = bool(getattr(settings, "DEBUG", False))
        rp_origin = (getattr(settings, "RP_ORIGIN", "") or "http://localhost:3000").strip().rstrip("/")
        return cls(
            rp_name=(getattr(settings, "RP_NAME", "") or "Todo App").strip(),
            rp_origin=rp_origin,
            rp_id=resolve_rp_id(getattr(settings, "RP_ID", ""), rp_origin),
            session_secret=resolve_session_secret(
                getattr(settings, "SESSION_SIGNING_SECRET", ""), debug
            ),
            session_lifetime=getattr(settings, "SESSION_TOKEN_LIFETIME", timedelta(days=7)),
            cookie_name=getattr(settings, "SESSION_TOKEN_COOKIE_NAME", "tasktrack_session"),
            secure_cookies=not debug,
            login_url=getattr(settings, "LOGIN_URL", "/login"),
            protected_paths=tuple(getattr(settings, "GATE_PROTECTED_PATHS", ["/", "/calendar"])),
        )


def resolve_rp_id(explicit: str, rp_origin: str) -> str:
    """
    Return the WebAuthn RP ID.

    An explicit value wins; otherwise the hostname of the RP origin is used,
    falling back to `localhost` when the origin cannot be parsed.
    """
    explicit = (explicit or "").strip().lower()
    if explicit:
        return explicit

    hostname = urlparse(rp_origin).hostname
    if not hostname:
        logger.warning("Failed to derive RP ID from RP_ORIGIN=%r, falling back to localhost", rp_origin)
        return "localhost"
    return hostname.lower()


def resolve_session_secret(configured: str, debug: bool) -> str:
    secret = (configured or "").strip()
    if secret:
        return secret

    if debug:
        logger.warning(
            "SESSION_SIGNING_SECRET is not set; using the INSECURE fallback development secret. "
            "Never run like this in production."
        )
        return FALLBACK_DEV_SECRET

    raise ConfigurationError("SESSION_SIGNING_SECRET must be configured when DEBUG is off")
