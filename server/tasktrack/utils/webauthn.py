from typing import Any

from fido2.utils import websafe_decode, websafe_encode


def _is_byte(item: Any) -> bool:
    return isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255


def webauthn_json_bytes_to_bytes(value: Any) -> bytes:
    """
    Convert a JSON WebAuthn binary field into raw bytes.

    Supported inputs:
    - list[int]: JSON byte array
    - str: base64url (padding optional)
    """
    if isinstance(value, list):
        if not all(_is_byte(item) for item in value):
            raise ValueError("WebAuthn byte array must hold integers in 0..255")
        return bytes(value)

    if isinstance(value, str):
        return websafe_decode(value)

    raise ValueError("Unsupported WebAuthn binary value type")


def webauthn_normalize_credential_id(value: Any) -> str:
    """
    Normalize a credential id coming from the frontend into a canonical base64url string.

    Stored credential ids are unpadded base64url, so a byte-array or a padded
    string sent by the browser still matches the database row.
    """
    return websafe_encode(webauthn_json_bytes_to_bytes(value))


def webauthn_normalize_response(data: Any) -> dict:
    """
    Rewrite binary fields of a browser credential response as unpadded base64url.

    Browsers serialize `PublicKeyCredential` either with base64url strings
    (`toJSON()`) or with byte arrays; fido2 accepts only the former.
    """
    if not isinstance(data, dict):
        raise ValueError("Credential response must be an object")

    normalized = dict(data)
    raw_id = data.get("rawId") or data.get("id")
    if raw_id is None:
        raise ValueError("Missing credential ID")
    normalized["rawId"] = webauthn_normalize_credential_id(raw_id)
    normalized["id"] = normalized["rawId"]
    normalized.setdefault("type", "public-key")
    normalized.setdefault("clientExtensionResults", {})

    inner = data.get("response")
    if not isinstance(inner, dict):
        raise ValueError("Missing credential response data")
    normalized["response"] = {
        key: (websafe_encode(webauthn_json_bytes_to_bytes(value)) if isinstance(value, (list, str)) else value)
        for key, value in inner.items()
        if key != "transports" and value is not None
    }
    return normalized


def webauthn_response_transports(data: dict) -> list[str]:
    inner = data.get("response") or {}
    transports = inner.get("transports") if isinstance(inner, dict) else None
    if not isinstance(transports, list):
        return []
    return [value for value in transports if isinstance(value, str)]
