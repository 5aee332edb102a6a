"""Custom user model used by the `tasktrack` Django app.

The project enforces passwordless authentication (passkeys only). This module
extends Django's `AbstractUser` with the display name shown by the planner and
the single pending WebAuthn challenge slot.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user model for passwordless authentication (passkeys only)"""

    email = models.EmailField(
        unique=True,
        help_text="Lowercased email address, also used as the username."
    )
    display_name = models.CharField(
        max_length=150,
        help_text="Name shown in the planner and to the authenticator."
    )
    current_challenge = models.CharField(
        max_length=128,
        null=True,
        blank=True,
        help_text="Outstanding WebAuthn challenge (base64url). At most one per user."
    )
    current_challenge_expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Absolute expiry instant of the outstanding challenge."
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"

    def save(self, *args, **kwargs):
        """Override save to ensure users have unusable passwords by default (passwordless auth)"""
        if self._state.adding and not self.password:
            self.set_unusable_password()
        super().save(*args, **kwargs)

    def __str__(self):
        """Return a human-readable identifier for the user."""
        return self.email or self.username
