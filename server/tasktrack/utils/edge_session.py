# tasktrack/utils/edge_session.py
#
# -----------------------------------------------------------------------------
# Restricted-context session verification
# -----------------------------------------------------------------------------
# Used by the request gate, which runs before URL resolution on every matched
# navigation. It must stay cheap and self-contained:
#   - no ORM / database access
#   - no PyJWT (the full runtime verifier lives in tasktrack.utils.session)
#   - only raw HMAC-SHA256 from `cryptography` plus base64/json parsing
#
# It implements the same token contract as tasktrack.utils.session, written
# down in that module's docstring. Claims other than user_id / iat / exp are
# ignored. Both verifiers are cross-checked against one fixture set of valid /
# tampered / expired / malformed tokens.
# -----------------------------------------------------------------------------

import base64
import json
import time

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from tasktrack.utils.session_types import Session

EDGE_ALGORITHM = "HS256"


def b64url_decode(s: str) -> bytes:
    """
    Decode URL-safe Base64 with optional missing padding.

    Padding is restored automatically to allow lenient decoding.
    """
    raw = s.encode("utf-8")
    raw += b"=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(raw)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _header_allowed(header) -> bool:
    if not isinstance(header, dict) or header.get("alg") != EDGE_ALGORITHM:
        return False
    if "kid" in header and not isinstance(header["kid"], str):
        return False
    return "crit" not in header and "b64" not in header


class EdgeSessionVerifier:
    def __init__(self, config):
        self._key = config.session_secret.encode("utf-8")

    def verify(self, token, now: int | None = None) -> Session | None:
        if not token or not isinstance(token, str):
            return None

        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts

        try:
            header = json.loads(b64url_decode(header_b64))
            if not _header_allowed(header):
                return None

            signature = b64url_decode(signature_b64)
            mac = hmac.HMAC(self._key, hashes.SHA256())
            mac.update(f"{header_b64}.{payload_b64}".encode("utf-8"))
            mac.verify(signature)

            payload = json.loads(b64url_decode(payload_b64))
        except (InvalidSignature, ValueError):
            return None

        if not isinstance(payload, dict):
            return None

        user_id = payload.get("user_id")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not (_is_int(user_id) and _is_int(issued_at) and _is_int(expires_at)):
            return None
        if user_id <= 0:
            return None

        current = int(time.time()) if now is None else int(now)
        if current >= expires_at:
            return None

        return Session(user_id=user_id, issued_at=issued_at, expires_at=expires_at)
