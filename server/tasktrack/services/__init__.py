"""Domain services for the `tasktrack` app."""

from .ceremony import CeremonyEngine, CeremonyStart, check_sign_count

__all__ = [
    "CeremonyEngine",
    "CeremonyStart",
    "check_sign_count",
]
