from tasktrack.views.api_root import api_root
from tasktrack.views.auth import auth_me, auth_logout, passkey_list
from tasktrack.views.health import health_check
from tasktrack.views.pages import calendar, home, login
from tasktrack.views.passkey import passkey_register_begin, passkey_register_complete, passkey_login_begin, passkey_login_complete

__all__ = [
    "api_root",
    "auth_me",
    "auth_logout",
    "passkey_list",
    "health_check",
    "calendar",
    "home",
    "login",
    "passkey_register_begin",
    "passkey_register_complete",
    "passkey_login_begin",
    "passkey_login_complete",
]
