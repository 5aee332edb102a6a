from django_ratelimit.decorators import ratelimit
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from tasktrack.apps import get_auth_config
from tasktrack.serializers import UserSerializer
from tasktrack.services import CeremonyEngine
from tasktrack.utils.session import apply_session_cookie


def _engine() -> CeremonyEngine:
    return CeremonyEngine(get_auth_config())


def _payload(request) -> dict:
    return request.data if isinstance(request.data, dict) else {}


@ratelimit(group="passkey_register_begin", key="ip", rate="10/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def passkey_register_begin(request):
    """
    Start passkey registration, creating the user on first use.

    POST /api/auth/register/begin/
    {
        "email": "a@x.com",
        "displayName": "A"        # required only for a new email
    }

    Returns `{options, user}`; `options` goes to `navigator.credentials.create()`.
    """
    data = _payload(request)
    start = _engine().begin_registration(data.get("email"), data.get("displayName"))
    return Response({"options": start.options, "user": UserSerializer(start.user).data})


@ratelimit(group="passkey_register_complete", key="ip", rate="10/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def passkey_register_complete(request):
    """
    Finish passkey registration and open a session.

    POST /api/auth/register/complete/
    {
        "email": "a@x.com",
        "response": { ...PublicKeyCredential JSON... },
        "name": "MacBook"          # optional device label
    }
    """
    data = _payload(request)
    user = _engine().complete_registration(
        data.get("email"),
        data.get("response"),
        name=data.get("name"),
    )

    response = Response({"verified": True, "user": UserSerializer(user).data})
    apply_session_cookie(response, get_auth_config(), user.id)
    return response


@ratelimit(group="passkey_login_begin", key="ip", rate="10/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def passkey_login_begin(request):
    """
    Start passkey authentication.

    POST /api/auth/login/begin/
    {
        "email": "a@x.com"
    }

    Returns `{options, user}`; `options.allowCredentials` lists the user's passkeys.
    """
    data = _payload(request)
    start = _engine().begin_authentication(data.get("email"))
    return Response({"options": start.options, "user": UserSerializer(start.user).data})


@ratelimit(group="passkey_login_complete", key="ip", rate="10/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def passkey_login_complete(request):
    """
    Verify a passkey assertion and open a session.

    POST /api/auth/login/complete/
    {
        "email": "a@x.com",
        "response": { ...PublicKeyCredential JSON... }
    }
    """
    data = _payload(request)
    user = _engine().complete_authentication(data.get("email"), data.get("response"))

    response = Response({"verified": True, "user": UserSerializer(user).data})
    apply_session_cookie(response, get_auth_config(), user.id)
    return response
