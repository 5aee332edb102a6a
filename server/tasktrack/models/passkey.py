"""Registered WebAuthn credentials.

Binary values from the authenticator are kept as unpadded base64url text so
they survive JSON round-trips to the browser unchanged.
"""

from django.conf import settings
from django.db import models


class Passkey(models.Model):
    """One public-key credential bound to one user"""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="passkeys",
    )
    credential_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Raw credential id as base64url; unique across all users",
    )
    public_key = models.TextField(
        help_text="CBOR-encoded COSE key as base64url",
    )
    sign_count = models.BigIntegerField(
        default=0,
        help_text="Last accepted signature counter (0 for counterless authenticators)",
    )
    transports = models.JSONField(
        default=list,
        blank=True,
        help_text="Transport hints (usb, nfc, ble, internal, hybrid) for allowCredentials",
    )
    name = models.CharField(
        max_length=100,
        help_text="Device label chosen at registration",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "passkeys"
        indexes = [
            models.Index(fields=["user", "created_at"], name="passkeys_user_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.user.email})"
