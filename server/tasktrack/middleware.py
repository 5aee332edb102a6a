"""Request gate evaluated before URL resolution.

- `/login`: a valid session is redirected to `/`, anything else passes.
- protected pages (`/`, `/calendar/...`): no valid session redirects to
  `/login`, carrying the original path and query as `next` unless the path is
  `/`.
- everything else passes without touching the cookie, so static assets and
  API calls never pay for signature verification.

Only the restricted verifier is used here: no database access, no PyJWT.
"""

from urllib.parse import urlencode

from django.http import HttpResponseRedirect

from tasktrack.apps import get_auth_config
from tasktrack.utils.edge_session import EdgeSessionVerifier


class RequestGateMiddleware:
    def __init__(self, get_response, config=None):
        self.get_response = get_response
        self.config = config or get_auth_config()
        self.verifier = EdgeSessionVerifier(self.config)

    def __call__(self, request):
        path = request.path_info
        is_login = self._is_login_path(path)
        if not is_login and not self._is_protected_path(path):
            return self.get_response(request)

        session = self.verifier.verify(request.COOKIES.get(self.config.cookie_name))
        request.gate_session = session

        if is_login:
            if session is not None:
                return HttpResponseRedirect("/")
            return self.get_response(request)

        if session is not None:
            return self.get_response(request)

        login_url = self.config.login_url
        if path != "/":
            query = request.META.get("QUERY_STRING", "")
            target = f"{path}?{query}" if query else path
            login_url = f"{login_url}?{urlencode({'next': target})}"
        return HttpResponseRedirect(login_url)

    def _is_login_path(self, path: str) -> bool:
        login_url = self.config.login_url.rstrip("/")
        return path == login_url or path.startswith(f"{login_url}/")

    def _is_protected_path(self, path: str) -> bool:
        for protected in self.config.protected_paths:
            if protected == "/":
                if path == "/":
                    return True
                continue
            base = protected.rstrip("/")
            if path == base or path.startswith(f"{base}/"):
                return True
        return False
