"""Database models exposed by the `tasktrack` Django app.

This package aggregates model classes to provide a convenient import surface
for other parts of the backend.
"""

from .passkey import Passkey
from .user import User

__all__ = [
    "Passkey",
    "User",
]
