from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

ROOT_LINKS = {
    "health": "health_check",
    "auth_me": "auth_me",
    "auth_logout": "auth_logout",
    "passkeys": "passkey_list",
    "register_begin": "passkey_register_begin",
    "register_complete": "passkey_register_complete",
    "login_begin": "passkey_login_begin",
    "login_complete": "passkey_login_complete",
}


@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """Index of the auth API for the browsable renderer."""
    return Response(
        {label: reverse(name, request=request, format=format) for label, name in ROOT_LINKS.items()}
    )
