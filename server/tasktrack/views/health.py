import logging

from django.core.cache import cache
from django.db import connection
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)

PROBE_KEY = "tasktrack:health"


def _probe_database() -> str:
    connection.ensure_connection()
    return "ok"


def _probe_cache() -> str:
    # Also backs the ceremony rate limiter.
    cache.set(PROBE_KEY, "ok", 10)
    return "ok" if cache.get(PROBE_KEY) == "ok" else "error"


PROBES = {
    "database": _probe_database,
    "cache": _probe_cache,
}


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Liveness probe for the auth backend.

    GET /api/health/

    200 `{"status": "healthy", "checks": {...}}` when every probe passes,
    503 with `"degraded"` otherwise.
    """
    checks = {}
    for name, probe in PROBES.items():
        try:
            checks[name] = probe()
        except Exception as exc:
            logger.warning("Health probe %s failed: %s", name, exc)
            checks[name] = f"error: {exc}"

    healthy = all(result == "ok" for result in checks.values())
    return Response(
        {"status": "healthy" if healthy else "degraded", "checks": checks},
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
