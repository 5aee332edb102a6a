import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from tasktrack.apps import get_auth_config
from tasktrack.serializers import PasskeySerializer, UserSerializer
from tasktrack.utils.session import clear_session_cookie

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([AllowAny])
def auth_me(request):
    """
    Report whether the request carries a valid session.

    GET /api/auth/me/

    Returns:
    {
        "authenticated": true,
        "user": {"id": 1, "email": "a@x.com", "displayName": "A"}
    }

    An anonymous request gets `{"authenticated": false}` with status 200.
    """
    if not request.user or not request.user.is_authenticated:
        return Response({"authenticated": False})

    return Response({"authenticated": True, "user": UserSerializer(request.user).data})


@api_view(["POST"])
@permission_classes([AllowAny])
def auth_logout(request):
    """
    Log out by overwriting the session cookie with an expired empty value.

    POST /api/auth/logout/

    Notes:
    - Sessions are stateless and there is no revocation list: a token captured
      before logout keeps working until its own expiry.
    """
    if request.user and request.user.is_authenticated:
        logger.info("User id=%s logged out", request.user.id)

    response = Response({"message": "Successfully logged out"})
    clear_session_cookie(response, get_auth_config())
    return response


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def passkey_list(request):
    """
    List the passkeys registered by the current user.

    GET /api/auth/passkeys/
    """
    passkeys = request.user.passkeys.order_by("created_at")
    return Response(PasskeySerializer(passkeys, many=True).data)
