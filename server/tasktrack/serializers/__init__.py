"""Serializer package for the `tasktrack` Django app.

This package re-exports the public DRF serializer classes used by views.
"""

from .user import UserSerializer, PasskeySerializer

__all__ = [
    "UserSerializer",
    "PasskeySerializer",
]
