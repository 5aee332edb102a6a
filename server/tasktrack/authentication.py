from django.contrib.auth import get_user_model
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from tasktrack.apps import get_auth_config
from tasktrack.utils.session import verify_session_token

# DRF resolves DEFAULT_AUTHENTICATION_CLASSES while `rest_framework.views` is
# still importing, so this module must not import tasktrack.stores or
# tasktrack.utils.exceptions at load time.

SAFE_METHODS = ("GET", "HEAD", "OPTIONS", "TRACE")


class SessionCookieAuthentication(BaseAuthentication):
    """
    Authenticate API requests from the HttpOnly session cookie.

    Uses the full-runtime verifier and then loads the user. A missing, invalid
    or expired cookie, or a token for a user that no longer exists, leaves the
    request anonymous instead of raising: being logged out is the normal case.

    Cookie-authenticated requests with an unsafe method must come from the
    relying party origin or from this host. The ceremony views are CSRF exempt
    and carry no CSRF token, so the browser `Origin` header is the check.
    """

    def authenticate(self, request):
        config = get_auth_config()
        session = verify_session_token(config, request.COOKIES.get(config.cookie_name))
        if session is None:
            return None

        user = get_user_model()._default_manager.filter(pk=session.user_id).first()
        if user is None or not user.is_active:
            return None

        self.enforce_origin(request, config)
        return (user, session)

    def enforce_origin(self, request, config):
        if request.method in SAFE_METHODS:
            return
        origin = request.META.get("HTTP_ORIGIN")
        if not origin:
            return
        own_origin = f"{request.scheme}://{request.get_host()}"
        if origin not in (config.rp_origin, own_origin):
            raise exceptions.PermissionDenied("Cross-site request rejected")

    def authenticate_header(self, request):
        # Gives 401 (rather than 403) on protected endpoints.
        return "Cookie"
