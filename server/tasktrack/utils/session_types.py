from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """Verified session subject. Never persisted; rebuilt from the token on each request."""

    user_id: int
    issued_at: int
    expires_at: int
