from django.test import SimpleTestCase

from tasktrack.utils.exceptions import CounterRegressionError, format_error
from tasktrack.utils.webauthn import (
    webauthn_json_bytes_to_bytes,
    webauthn_normalize_credential_id,
    webauthn_normalize_response,
    webauthn_response_transports,
)


class WebAuthnUtilsTest(SimpleTestCase):
    def test_json_bytes_from_list(self):
        self.assertEqual(webauthn_json_bytes_to_bytes([1, 2, 3]), b"\x01\x02\x03")

    def test_json_bytes_from_base64url_with_or_without_padding(self):
        self.assertEqual(webauthn_json_bytes_to_bytes("AQID"), b"\x01\x02\x03")
        self.assertEqual(webauthn_json_bytes_to_bytes("AQI"), b"\x01\x02")
        self.assertEqual(webauthn_json_bytes_to_bytes("AQI="), b"\x01\x02")

    def test_json_bytes_rejects_other_types(self):
        with self.assertRaises(ValueError):
            webauthn_json_bytes_to_bytes({"a": 1})

    def test_json_bytes_rejects_items_that_are_not_bytes(self):
        for value in (["a"], [256], [-1], [1.5], [True], [None]):
            with self.subTest(value=value), self.assertRaises(ValueError):
                webauthn_json_bytes_to_bytes(value)

    def test_normalize_response_rejects_bad_byte_arrays(self):
        with self.assertRaises(ValueError):
            webauthn_normalize_response({"rawId": ["a"], "response": {}})
        with self.assertRaises(ValueError):
            webauthn_normalize_response({"rawId": "AQID", "response": {"clientDataJSON": [300]}})

    def test_credential_id_is_unpadded_base64url(self):
        self.assertEqual(webauthn_normalize_credential_id([251, 255]), "-_8")
        self.assertEqual(webauthn_normalize_credential_id("-_8="), "-_8")

    def test_normalize_response_re_encodes_binary_fields(self):
        normalized = webauthn_normalize_response(
            {
                "rawId": [1, 2, 3],
                "response": {
                    "clientDataJSON": [123, 125],
                    "attestationObject": "AQID",
                    "transports": ["usb"],
                    "userHandle": None,
                },
            }
        )

        self.assertEqual(normalized["rawId"], "AQID")
        self.assertEqual(normalized["id"], "AQID")
        self.assertEqual(normalized["type"], "public-key")
        self.assertEqual(normalized["clientExtensionResults"], {})
        self.assertEqual(
            normalized["response"],
            {"clientDataJSON": "e30", "attestationObject": "AQID"},
        )

    def test_normalize_response_requires_id_and_inner_response(self):
        with self.assertRaises(ValueError):
            webauthn_normalize_response({"response": {}})
        with self.assertRaises(ValueError):
            webauthn_normalize_response({"id": "AQID"})
        with self.assertRaises(ValueError):
            webauthn_normalize_response(["not", "a", "dict"])

    def test_response_transports(self):
        self.assertEqual(
            webauthn_response_transports({"response": {"transports": ["usb", 5, "nfc"]}}),
            ["usb", "nfc"],
        )
        self.assertEqual(webauthn_response_transports({"response": {}}), [])
        self.assertEqual(webauthn_response_transports({}), [])


class ErrorFormattingTest(SimpleTestCase):
    def test_format_error_shape(self):
        self.assertEqual(
            format_error("not_found", "User not found"),
            {"error": {"code": "NOT_FOUND", "message": "User not found", "details": {}}},
        )

    def test_counter_regression_message_names_both_counters(self):
        exc = CounterRegressionError(5, 3)

        self.assertIn("stored 5", str(exc))
        self.assertIn("received 3", str(exc))
