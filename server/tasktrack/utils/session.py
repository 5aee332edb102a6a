"""
Session tokens: issue, verify (full runtime) and cookie helpers.

Token contract (shared with `tasktrack.utils.edge_session`, which implements it
independently for the request gate):

    <header_b64url>.<payload_b64url>.<signature_b64url>

1. exactly three `.`-separated segments, non-empty string;
2. header is a JSON object with `"alg": "HS256"`; a `kid`, when present, must
   be a string, and a header carrying `crit` or `b64` is refused;
3. signature is HMAC-SHA256(secret, "<header_b64url>.<payload_b64url>");
4. payload is a JSON object with `user_id` (positive int, not a bool) and
   integer `iat` / `exp`; any other claim (`aud`, `iss`, `sub`, `jti`, `nbf`,
   ...) is ignored;
5. the token is accepted iff `now < exp`.

Verification never raises: every failure means "no session". Logout only
overwrites the cookie, so a token captured before logout keeps verifying until
its `exp` (there is no server-side revocation list).
"""

import logging
import time

import jwt

from tasktrack.utils.session_types import Session

logger = logging.getLogger(__name__)

SESSION_ALGORITHM = "HS256"


def _now_epoch() -> int:
    return int(time.time())


def issue_session_token(config, user_id: int, now: int | None = None) -> str:
    issued_at = _now_epoch() if now is None else int(now)
    payload = {
        "user_id": int(user_id),
        "iat": issued_at,
        "exp": issued_at + config.session_ttl_seconds,
    }
    return jwt.encode(payload, config.session_secret, algorithm=SESSION_ALGORITHM)


# PyJWT validates only part of the header and some registered claims on its
# own; pin the contract explicitly so the result does not depend on its version.
_IGNORED_CLAIM_CHECKS = {
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


def _header_allowed(header: dict) -> bool:
    if header.get("alg") != SESSION_ALGORITHM:
        return False
    if "kid" in header and not isinstance(header["kid"], str):
        return False
    return "crit" not in header and "b64" not in header


def verify_session_token(config, token, now: int | None = None) -> Session | None:
    if not token or not isinstance(token, str) or token.count(".") != 2:
        return None

    try:
        if not _header_allowed(jwt.get_unverified_header(token)):
            logger.debug("Rejected session token: header not allowed")
            return None
        # Expiry is checked below against `now` so both verifiers share one clock rule.
        payload = jwt.decode(
            token,
            config.session_secret,
            algorithms=[SESSION_ALGORITHM],
            options=_IGNORED_CLAIM_CHECKS,
        )
    except jwt.PyJWTError as exc:
        logger.debug("Rejected session token: %s", exc)
        return None

    user_id = payload.get("user_id")
    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    for value in (user_id, issued_at, expires_at):
        if not isinstance(value, int) or isinstance(value, bool):
            logger.debug("Rejected session token: malformed claims")
            return None
    if user_id <= 0:
        return None

    current = _now_epoch() if now is None else int(now)
    if current >= expires_at:
        logger.debug("Rejected session token: expired")
        return None

    return Session(user_id=user_id, issued_at=issued_at, expires_at=expires_at)


def apply_session_cookie(response, config, user_id: int, now: int | None = None):
    token = issue_session_token(config, user_id, now=now)
    response.set_cookie(
        config.cookie_name,
        token,
        # HttpOnly prevents JS access; reduces XSS impact.
        httponly=True,
        # Secure cookies should be enabled outside DEBUG (HTTPS only).
        secure=config.secure_cookies,
        samesite="Lax",
        max_age=config.session_ttl_seconds,
        path="/",
    )
    return token


def clear_session_cookie(response, config):
    """Overwrite the session cookie with an already-expired empty value."""
    response.set_cookie(
        config.cookie_name,
        "",
        httponly=True,
        secure=config.secure_cookies,
        samesite="Lax",
        max_age=0,
        path="/",
    )
