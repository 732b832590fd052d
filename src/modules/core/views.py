"""Liveness endpoint for load balancers and the deployment pipeline.

``GET /health`` answers 200 when the order store and the cache both
respond, 503 otherwise.  Each check reports its own state so an operator
can tell which dependency failed.
"""

import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import connection
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)

SERVICE_NAME = "delivery-orders"
CACHE_KEY = "health:ping"


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


def check_database() -> Dict[str, Any]:
    start = time.monotonic()
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {"vendor": connection.vendor, "response_time_ms": _elapsed_ms(start)}


def check_cache() -> Dict[str, Any]:
    start = time.monotonic()
    cache.set(CACHE_KEY, SERVICE_NAME, 10)
    if cache.get(CACHE_KEY) != SERVICE_NAME:
        raise ConnectionError("cache did not return the value just written")
    return {
        "backend": settings.CACHES["default"]["BACKEND"].rsplit(".", 1)[-1],
        "response_time_ms": _elapsed_ms(start),
    }


CHECKS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "database": check_database,
    "cache": check_cache,
}


def health_check(request: HttpRequest) -> JsonResponse:
    checks: Dict[str, Dict[str, Any]] = {}
    for name, check in CHECKS.items():
        try:
            checks[name] = {"status": "up", **check()}
        except Exception as exc:
            logger.error(f"health.{name}_down", error=str(exc), exc_info=True)
            checks[name] = {"status": "down", "error": type(exc).__name__}

    healthy = all(c["status"] == "up" for c in checks.values())
    logger.info("health.checked", healthy=healthy)

    return JsonResponse(
        {
            "service": SERVICE_NAME,
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "checks": checks,
        },
        status=200 if healthy else 503,
    )
