from django.apps import AppConfig, apps
from django.conf import settings


class TasktrackConfig(AppConfig):
    name = "tasktrack"
    default_auto_field = "django.db.models.BigAutoField"

    auth_config = None

    def ready(self) -> None:
        from tasktrack.conf import AuthConfig

        # Fails fast with ConfigurationError when the signing secret is missing in production.
        self.auth_config = AuthConfig.from_settings(settings)


def get_auth_config():
    """Return the `AuthConfig` resolved at startup."""
    return apps.get_app_config("tasktrack").auth_config
