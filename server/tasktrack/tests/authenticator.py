"""In-memory WebAuthn authenticator used by the ceremony tests.

Produces the same JSON a browser hands back from `navigator.credentials.create()`
and `.get()` (base64url fields, "none" attestation, ES256 key), so the real
`Fido2Server` verification path runs end to end.
"""

import hashlib
import json
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from fido2 import cbor
from fido2.cose import ES256
from fido2.utils import websafe_encode
from fido2.webauthn import Aaguid, AttestedCredentialData, AuthenticatorData

FLAG_UP = 0x01
FLAG_AT = 0x40


class SoftAuthenticator:
    def __init__(self, rp_id="localhost", origin="http://localhost:3000", counter=0):
        self.rp_id = rp_id
        self.origin = origin
        self.counter = counter
        self.credential_id = os.urandom(16)
        self._private_key = ec.generate_private_key(ec.SECP256R1())
        self.public_key = ES256.from_cryptography_key(self._private_key.public_key())

    @property
    def credential_id_b64(self) -> str:
        return websafe_encode(self.credential_id)

    def _client_data(self, ceremony_type, challenge, origin=None) -> bytes:
        return json.dumps(
            {
                "type": ceremony_type,
                "challenge": challenge,
                "origin": origin or self.origin,
                "crossOrigin": False,
            }
        ).encode("utf-8")

    def _rp_id_hash(self, rp_id=None) -> bytes:
        return hashlib.sha256((rp_id or self.rp_id).encode("utf-8")).digest()

    def create(self, options, origin=None, rp_id=None, transports=None) -> dict:
        """Answer registration options with a "none" attestation."""
        credential_data = AttestedCredentialData.create(
            Aaguid.NONE, self.credential_id, self.public_key
        )
        auth_data = AuthenticatorData.create(
            self._rp_id_hash(rp_id),
            FLAG_UP | FLAG_AT,
            self.counter,
            credential_data,
        )
        attestation_object = cbor.encode({"fmt": "none", "authData": bytes(auth_data), "attStmt": {}})
        client_data = self._client_data("webauthn.create", options["challenge"], origin)

        return {
            "id": self.credential_id_b64,
            "rawId": self.credential_id_b64,
            "type": "public-key",
            "response": {
                "clientDataJSON": websafe_encode(client_data),
                "attestationObject": websafe_encode(attestation_object),
                "transports": list(transports or ["internal"]),
            },
            "clientExtensionResults": {},
        }

    def get(self, options, origin=None, counter=None, sign=True) -> dict:
        """Answer authentication options with a signed assertion."""
        if counter is None:
            self.counter += 1
            counter = self.counter
        auth_data = AuthenticatorData.create(self._rp_id_hash(), FLAG_UP, counter)
        client_data = self._client_data("webauthn.get", options["challenge"], origin)

        message = bytes(auth_data) + hashlib.sha256(client_data).digest()
        if sign:
            signature = self._private_key.sign(message, ec.ECDSA(hashes.SHA256()))
        else:
            signature = b"\x30\x06\x02\x01\x01\x02\x01\x01"

        return {
            "id": self.credential_id_b64,
            "rawId": self.credential_id_b64,
            "type": "public-key",
            "response": {
                "clientDataJSON": websafe_encode(client_data),
                "authenticatorData": websafe_encode(bytes(auth_data)),
                "signature": websafe_encode(signature),
            },
            "clientExtensionResults": {},
        }
