import os
import subprocess
import sys

from django.conf import settings
from django.test import SimpleTestCase

# Runs in a fresh interpreter: this test process has already imported every
# module, which hides import cycles between the app and DRF settings.
BOOT_SCRIPT = """
import django
django.setup()

from rest_framework.settings import api_settings
import config.urls

print(",".join(cls.__name__ for cls in api_settings.DEFAULT_AUTHENTICATION_CLASSES))
"""


class AppBootTest(SimpleTestCase):
    def _run_fresh(self, script):
        env = dict(os.environ)
        env.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
        env.setdefault("DEBUG", "true")
        env.setdefault("SESSION_SIGNING_SECRET", "tasktrack-test-signing-secret-0123456789abcdef")
        return subprocess.run(
            [sys.executable, "-c", script],
            cwd=settings.BASE_DIR,
            env=env,
            capture_output=True,
            text=True,
            timeout=120,
        )

    def test_django_setup_succeeds_in_a_fresh_process(self):
        result = self._run_fresh(BOOT_SCRIPT)

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertEqual(result.stdout.strip().splitlines()[-1], "SessionCookieAuthentication")
