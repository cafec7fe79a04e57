"""
Core views for health checks and system status.
"""

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from core.config import missing_settings, product_scopes

SERVICE_NAME = "subscription-auth"


def _service_version() -> str:
    return getattr(settings, "SERVICE_VERSION", "1.0.0")


@method_decorator(csrf_exempt, name="dispatch")
class IndexView(View):
    """Service banner with the public endpoint list."""

    def get(self, _request):
        """Describe the service."""
        return JsonResponse(
            {
                "service": SERVICE_NAME,
                "version": _service_version(),
                "productScopes": sorted(product_scopes()),
                "endpoints": {
                    "verify": "POST /api/verify",
                    "subscribe": "POST /api/subscribe",
                    "renew": "POST /api/renew",
                    "cancel": "POST /api/cancel",
                    "admin": "POST /api/admin/{subscribe,renew,cancel,subscriptions,stats}",
                    "scoped": "POST /api/v1/<scope>/...",
                    "health": "GET /health/",
                    "docs": "GET /api/docs/",
                },
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse(
            {
                "status": "healthy",
                "service": SERVICE_NAME,
                "version": _service_version(),
                "timestamp": timezone.now().isoformat(),
            }
        )


def _check_database() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return True
    except DatabaseError:
        return False


def _check_cache() -> bool:
    try:
        cache.set("health_check", "ok", 10)
        return cache.get("health_check") == "ok"
    except Exception:  # pylint: disable=broad-exception-caught
        return False


@method_decorator(csrf_exempt, name="dispatch")
class HealthDBView(View):
    """Database health check endpoint."""

    def get(self, _request):
        """Check database connectivity."""
        if _check_database():
            return JsonResponse({"status": "healthy", "database": "connected"})
        return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class HealthCacheView(View):
    """Cache health check endpoint."""

    def get(self, _request):
        """Check cache connectivity."""
        if _check_cache():
            return JsonResponse({"status": "healthy", "cache": "connected"})
        return JsonResponse({"status": "unhealthy", "cache": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        missing = missing_settings()
        checks = {
            "configuration": not missing,
            "database": _check_database(),
            "cache": _check_cache(),
        }

        all_healthy = all(checks.values())
        body = {
            "status": "ready" if all_healthy else "not_ready",
            "checks": checks,
        }
        if missing:
            body["missing"] = missing
        return JsonResponse(body, status=200 if all_healthy else 503)


def not_found(request, exception=None):  # pylint: disable=unused-argument
    """JSON 404 for unknown paths."""
    return JsonResponse(
        {"success": False, "code": "NOT_FOUND", "message": "Endpoint not found"}, status=404
    )


def server_error(request):  # pylint: disable=unused-argument
    """JSON 500 for errors that escape every view."""
    return JsonResponse(
        {"success": False, "code": "INTERNAL_ERROR", "message": "An internal error occurred"},
        status=500,
    )
