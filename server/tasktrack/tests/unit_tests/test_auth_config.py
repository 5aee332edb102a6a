from dataclasses import FrozenInstanceError
from datetime import timedelta
from types import SimpleNamespace

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from tasktrack.apps import get_auth_config
from tasktrack.conf import (
    FALLBACK_DEV_SECRET,
    AuthConfig,
    resolve_rp_id,
    resolve_session_secret,
)
from tasktrack.utils.exceptions import ConfigurationError


def fake_settings(**overrides):
    values = {
        "DEBUG": False,
        "RP_NAME": "Todo App",
        "RP_ORIGIN": "https://todo.example.com",
        "RP_ID": "",
        "SESSION_SIGNING_SECRET": "config-tests-signing-secret-0123456789abcdef",
        "SESSION_TOKEN_LIFETIME": timedelta(days=7),
        "SESSION_TOKEN_COOKIE_NAME": "tasktrack_session",
        "LOGIN_URL": "/login",
        "GATE_PROTECTED_PATHS": ["/", "/calendar"],
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class ResolveSessionSecretTest(SimpleTestCase):
    def test_configured_secret_wins(self):
        self.assertEqual(resolve_session_secret("  s3cret  ", debug=False), "s3cret")

    def test_missing_secret_in_production_is_fatal(self):
        with self.assertRaises(ConfigurationError):
            resolve_session_secret("", debug=False)

    def test_configuration_error_is_improperly_configured(self):
        self.assertTrue(issubclass(ConfigurationError, ImproperlyConfigured))

    def test_missing_secret_in_debug_uses_fallback_with_warning(self):
        with self.assertLogs("tasktrack.conf", level="WARNING") as logs:
            secret = resolve_session_secret(None, debug=True)

        self.assertEqual(secret, FALLBACK_DEV_SECRET)
        self.assertIn("INSECURE", logs.output[0])


class ResolveRpIdTest(SimpleTestCase):
    def test_explicit_value_wins(self):
        self.assertEqual(resolve_rp_id(" Example.COM ", "https://todo.example.com"), "example.com")

    def test_derived_from_origin_hostname(self):
        self.assertEqual(resolve_rp_id("", "https://Todo.Example.com:8443"), "todo.example.com")
        self.assertEqual(resolve_rp_id("", "http://localhost:3000"), "localhost")

    def test_unparseable_origin_falls_back_to_localhost(self):
        with self.assertLogs("tasktrack.conf", level="WARNING"):
            self.assertEqual(resolve_rp_id("", "not a url"), "localhost")


class AuthConfigTest(SimpleTestCase):
    def test_from_settings(self):
        config = AuthConfig.from_settings(fake_settings(RP_ORIGIN="https://todo.example.com/"))

        self.assertEqual(config.rp_name, "Todo App")
        self.assertEqual(config.rp_origin, "https://todo.example.com")
        self.assertEqual(config.rp_id, "todo.example.com")
        self.assertEqual(config.session_ttl_seconds, 7 * 24 * 60 * 60)
        self.assertTrue(config.secure_cookies)
        self.assertEqual(config.protected_paths, ("/", "/calendar"))

    def test_debug_disables_secure_cookies(self):
        config = AuthConfig.from_settings(fake_settings(DEBUG=True))

        self.assertFalse(config.secure_cookies)

    def test_missing_secret_fails_startup(self):
        with self.assertRaises(ConfigurationError):
            AuthConfig.from_settings(fake_settings(SESSION_SIGNING_SECRET=""))

    def test_defaults_for_missing_relying_party_settings(self):
        config = AuthConfig.from_settings(fake_settings(RP_NAME="", RP_ORIGIN=""))

        self.assertEqual(config.rp_name, "Todo App")
        self.assertEqual(config.rp_origin, "http://localhost:3000")
        self.assertEqual(config.rp_id, "localhost")

    def test_config_is_immutable(self):
        config = AuthConfig.from_settings(fake_settings())

        with self.assertRaises(FrozenInstanceError):
            config.session_secret = "changed"

    def test_app_exposes_startup_config(self):
        config = get_auth_config()

        self.assertIsInstance(config, AuthConfig)
        self.assertEqual(config.cookie_name, "tasktrack_session")
        self.assertTrue(config.session_secret)
