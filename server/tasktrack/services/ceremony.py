"""Passkey ceremonies: challenge issue and response verification.

Both ceremonies share one shape:

1. *begin*: resolve the user, build the options the browser hands to
   `navigator.credentials.create()` / `.get()`, and record the challenge in the
   user's single ledger slot (5 minute expiry, overwriting any older one).
2. *complete*: pop the challenge from the ledger *before* doing anything else,
   so every outcome (success or failure) consumes it, then let `Fido2Server`
   check client data, RP id hash, origin and signature.

The 60 second `timeout` in the options is only a hint for the browser UI. The
server-side ledger expiry is the sole source of truth.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta

from django.utils import timezone
from fido2 import cbor
from fido2.cose import CoseKey
from fido2.server import Fido2Server
from fido2.utils import websafe_decode, websafe_encode
from fido2.webauthn import (
    Aaguid,
    AttestedCredentialData,
    AuthenticatorData,
    PublicKeyCredentialDescriptor,
    PublicKeyCredentialRpEntity,
    PublicKeyCredentialType,
    PublicKeyCredentialUserEntity,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)

from tasktrack.models import Passkey, User
from tasktrack.stores import (
    ChallengeLedger,
    CredentialStore,
    PendingChallenge,
    UserStore,
    normalize_email,
)
from tasktrack.utils.exceptions import (
    AssertionVerificationError,
    ChallengeExpiredError,
    CounterRegressionError,
    NoCredentialsError,
    NotFoundError,
    ValidationError,
)
from tasktrack.utils.webauthn import (
    webauthn_normalize_response,
    webauthn_response_transports,
)

logger = logging.getLogger(__name__)

CEREMONY_TIMEOUT_MS = 60000
CHALLENGE_TTL = timedelta(minutes=5)
CHALLENGE_BYTES = 32
DEFAULT_DEVICE_NAME = "Unnamed Device"


@dataclass(frozen=True)
class CeremonyStart:
    options: dict
    user: User


def build_attested_credential(passkey: Passkey) -> AttestedCredentialData:
    credential_id = websafe_decode(passkey.credential_id)
    public_key = CoseKey.parse(cbor.decode(websafe_decode(passkey.public_key)))
    return AttestedCredentialData.create(Aaguid.NONE, credential_id, public_key)


def check_sign_count(stored: int, received: int) -> None:
    """
    Reject a signature counter that did not strictly increase.

    Authenticators that do not implement counters always report 0; when both
    sides are 0 there is nothing to compare.
    """
    if stored == 0 and received == 0:
        return
    if received <= stored:
        raise CounterRegressionError(stored, received)


class CeremonyEngine:
    def __init__(self, config, users=None, credentials=None, ledger=None):
        self.config = config
        self.users = users or UserStore()
        self.credentials = credentials or CredentialStore()
        self.ledger = ledger or ChallengeLedger()
        self.server = Fido2Server(
            PublicKeyCredentialRpEntity(name=config.rp_name, id=config.rp_id),
            verify_origin=self._verify_origin,
        )
        self.server.timeout = CEREMONY_TIMEOUT_MS

    def _verify_origin(self, origin: str) -> bool:
        return origin == self.config.rp_origin

    # --- Registration -------------------------------------------------------

    def begin_registration(self, email, display_name=None) -> CeremonyStart:
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")

        user = self.users.find_by_email(email)
        if user is None:
            user = self._create_user(email, display_name)

        existing = self.credentials.list_by_user(user.id)
        user_handle = str(user.id).encode("utf-8")
        challenge = secrets.token_bytes(CHALLENGE_BYTES)

        options, _state = self.server.register_begin(
            user=PublicKeyCredentialUserEntity(
                name=user.email,
                id=user_handle,
                display_name=user.display_name or user.email,
            ),
            credentials=[self._descriptor(pk) for pk in existing],
            resident_key_requirement=ResidentKeyRequirement.PREFERRED,
            user_verification=UserVerificationRequirement.PREFERRED,
            challenge=challenge,
        )

        payload = {
            "challenge": websafe_encode(challenge),
            "rp": {"id": self.config.rp_id, "name": self.config.rp_name},
            "user": {
                "id": websafe_encode(user_handle),
                "name": user.email,
                "displayName": user.display_name or user.email,
            },
            "pubKeyCredParams": [
                {"type": "public-key", "alg": param.alg}
                for param in options.public_key.pub_key_cred_params
            ],
            "timeout": CEREMONY_TIMEOUT_MS,
            "excludeCredentials": [
                {"type": "public-key", "id": pk.credential_id} for pk in existing
            ],
            "authenticatorSelection": {
                "residentKey": "preferred",
                "userVerification": "preferred",
            },
            "attestation": "none",
        }

        self._record_challenge(user, challenge)
        return CeremonyStart(options=payload, user=user)

    def complete_registration(self, email, response, name=None) -> User:
        user = self._require_user(email)
        pending = self._consume_challenge(user)

        try:
            normalized = webauthn_normalize_response(response)
        except ValueError as exc:
            raise ValidationError(str(exc))

        try:
            auth_data = self.server.register_complete(self._state(pending), response=normalized)
        except Exception as exc:
            logger.warning("Passkey registration rejected for user id=%s: %s", user.id, exc)
            raise AssertionVerificationError(f"Registration verification failed: {exc}")

        credential_data = auth_data.credential_data
        device_name = (name or "").strip() if isinstance(name, str) else ""
        self.credentials.insert(
            user_id=user.id,
            credential_id=websafe_encode(credential_data.credential_id),
            public_key=websafe_encode(cbor.encode(dict(credential_data.public_key))),
            sign_count=auth_data.counter,
            name=device_name or DEFAULT_DEVICE_NAME,
            transports=webauthn_response_transports(response),
        )
        logger.info("Registered passkey for user id=%s", user.id)
        return user

    # --- Authentication -----------------------------------------------------

    def begin_authentication(self, email) -> CeremonyStart:
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")

        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        existing = self.credentials.list_by_user(user.id)
        if not existing:
            raise NoCredentialsError("No passkeys registered for this user")

        challenge = secrets.token_bytes(CHALLENGE_BYTES)
        self.server.authenticate_begin(
            credentials=[self._descriptor(pk) for pk in existing],
            user_verification=UserVerificationRequirement.PREFERRED,
            challenge=challenge,
        )

        payload = {
            "challenge": websafe_encode(challenge),
            "rpId": self.config.rp_id,
            "allowCredentials": [
                {
                    "type": "public-key",
                    "id": pk.credential_id,
                    **({"transports": pk.transports} if pk.transports else {}),
                }
                for pk in existing
            ],
            "timeout": CEREMONY_TIMEOUT_MS,
            "userVerification": "preferred",
        }

        self._record_challenge(user, challenge)
        return CeremonyStart(options=payload, user=user)

    def complete_authentication(self, email, response) -> User:
        user = self._require_user(email)
        pending = self._consume_challenge(user)

        try:
            normalized = webauthn_normalize_response(response)
        except ValueError as exc:
            raise ValidationError(str(exc))

        passkey = self.credentials.find_by_credential_id(normalized["rawId"])
        if passkey is None or passkey.user_id != user.id:
            raise NotFoundError("Passkey not found")

        try:
            self.server.authenticate_complete(
                self._state(pending),
                [build_attested_credential(passkey)],
                response=normalized,
            )
            received = AuthenticatorData(
                websafe_decode(normalized["response"]["authenticatorData"])
            ).counter
        except Exception as exc:
            logger.warning("Passkey assertion rejected for user id=%s: %s", user.id, exc)
            raise AssertionVerificationError(f"Authentication verification failed: {exc}")

        try:
            check_sign_count(passkey.sign_count, received)
        except CounterRegressionError:
            logger.warning(
                "Signature counter regression for passkey id=%s (stored %s, received %s)",
                passkey.id,
                passkey.sign_count,
                received,
            )
            raise

        self.credentials.update_counter(passkey.credential_id, received)
        logger.info("User id=%s authenticated with passkey id=%s", user.id, passkey.id)
        return user

    # --- Helpers ------------------------------------------------------------

    def _create_user(self, email: str, display_name) -> User:
        try:
            user = self.users.create(email, display_name if isinstance(display_name, str) else "")
        except ValidationError:
            # A concurrent begin may have created the row between lookup and insert.
            user = self.users.find_by_email(email)
            if user is None:
                raise
            logger.info("Joined concurrently created user id=%s for registration", user.id)
            return user
        logger.info("Created user id=%s for passkey registration", user.id)
        return user

    def _require_user(self, email) -> User:
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required")
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _record_challenge(self, user: User, challenge: bytes) -> None:
        # Computed in the reference zone; stored and compared as a UTC instant.
        expires_at = timezone.localtime(timezone.now()) + CHALLENGE_TTL
        self.ledger.set_challenge(user.id, websafe_encode(challenge), expires_at)

    def _consume_challenge(self, user: User) -> PendingChallenge:
        pending = self.ledger.pop_challenge(user.id)
        if pending is None:
            raise ChallengeExpiredError("No challenge in progress")
        if pending.is_expired(timezone.now()):
            raise ChallengeExpiredError("Challenge expired")
        return pending

    @staticmethod
    def _state(pending: PendingChallenge) -> dict:
        return {
            "challenge": pending.value,
            "user_verification": UserVerificationRequirement.PREFERRED,
        }

    @staticmethod
    def _descriptor(passkey: Passkey) -> PublicKeyCredentialDescriptor:
        return PublicKeyCredentialDescriptor(
            type=PublicKeyCredentialType.PUBLIC_KEY,
            id=websafe_decode(passkey.credential_id),
        )
