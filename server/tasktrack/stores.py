"""ORM-backed stores consumed by the ceremony engine.

Three narrow contracts:
- `UserStore`: lookup/creation of users by normalized email.
- `CredentialStore`: the per-user list of registered passkeys.
- `ChallengeLedger`: the single pending challenge slot of each user.

The ledger lives in two nullable columns of the user row, so a user can never
hold more than one live challenge; every write is a single-row UPDATE keyed by
the user id.
"""

from dataclasses import dataclass
from datetime import datetime

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.utils import timezone

from tasktrack.models import Passkey, User
from tasktrack.utils.exceptions import ValidationError


def normalize_email(email) -> str:
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


@dataclass(frozen=True)
class PendingChallenge:
    value: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class UserStore:
    def find_by_email(self, email: str) -> User | None:
        return User.objects.filter(email=normalize_email(email)).first()

    def get_by_id(self, user_id) -> User | None:
        return User.objects.filter(pk=user_id).first()

    def create(self, email: str, display_name: str) -> User:
        email = normalize_email(email)
        display_name = (display_name or "").strip()
        if not email:
            raise ValidationError("Email is required")
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError("Invalid email format")
        if not display_name:
            raise ValidationError("Display name is required for registration")

        try:
            with transaction.atomic():
                return User.objects.create(
                    email=email,
                    username=email,
                    display_name=display_name,
                    is_active=True,
                )
        except IntegrityError:
            raise ValidationError("A user with this email already exists")


class CredentialStore:
    def list_by_user(self, user_id) -> list[Passkey]:
        return list(Passkey.objects.filter(user_id=user_id).order_by("created_at", "id"))

    def find_by_credential_id(self, credential_id: str) -> Passkey | None:
        return Passkey.objects.filter(credential_id=credential_id).select_related("user").first()

    def insert(
        self,
        user_id,
        credential_id: str,
        public_key: str,
        sign_count: int,
        name: str,
        transports=None,
    ) -> Passkey:
        try:
            with transaction.atomic():
                return Passkey.objects.create(
                    user_id=user_id,
                    credential_id=credential_id,
                    public_key=public_key,
                    sign_count=sign_count,
                    name=name,
                    transports=list(transports or []),
                )
        except IntegrityError:
            raise ValidationError("This passkey is already registered")

    def update_counter(self, credential_id: str, new_counter: int) -> None:
        Passkey.objects.filter(credential_id=credential_id).update(
            sign_count=new_counter,
            last_used_at=timezone.now(),
        )


class ChallengeLedger:
    def set_challenge(self, user_id, value: str, expires_at: datetime) -> None:
        # Overwrites any previous challenge: last writer wins.
        User.objects.filter(pk=user_id).update(
            current_challenge=value,
            current_challenge_expires_at=expires_at,
        )

    def get_challenge(self, user_id) -> PendingChallenge | None:
        row = (
            User.objects.filter(pk=user_id)
            .values("current_challenge", "current_challenge_expires_at")
            .first()
        )
        return self._to_pending(row)

    def clear_challenge(self, user_id) -> None:
        User.objects.filter(pk=user_id).update(
            current_challenge=None,
            current_challenge_expires_at=None,
        )

    def pop_challenge(self, user_id) -> PendingChallenge | None:
        """Read and clear the pending challenge in one locked transaction."""
        with transaction.atomic():
            row = (
                User.objects.select_for_update()
                .filter(pk=user_id)
                .values("current_challenge", "current_challenge_expires_at")
                .first()
            )
            pending = self._to_pending(row)
            if row is not None and row["current_challenge"] is not None:
                self.clear_challenge(user_id)
        return pending

    @staticmethod
    def _to_pending(row) -> PendingChallenge | None:
        if not row or not row["current_challenge"] or row["current_challenge_expires_at"] is None:
            return None
        return PendingChallenge(
            value=row["current_challenge"],
            expires_at=row["current_challenge_expires_at"],
        )
