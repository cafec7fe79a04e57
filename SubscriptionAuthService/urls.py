"""
URL configuration for SubscriptionAuthService project.

Client and admin routes are mounted twice: unscoped under /api/ for the
default product scope, and under /api/v1/<product_scope>/.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from core.views import HealthCacheView, HealthDBView, HealthView, IndexView, ReadyView

CLIENT_URLS = ("api.v1.subscriptions.urls", "subscriptions-api")
ADMIN_URLS = ("api.v1.admin.urls", "admin-api")

urlpatterns = [
    path("", IndexView.as_view(), name="index"),
    path("admin/", admin.site.urls),
    # Health check endpoints
    path("health/", HealthView.as_view(), name="health"),
    path("health/db/", HealthDBView.as_view(), name="health-db"),
    path("health/cache/", HealthCacheView.as_view(), name="health-cache"),
    path("ready/", ReadyView.as_view(), name="ready"),
    # OpenAPI Schema
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    # Swagger UI
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    # ReDoc
    path(
        "api/redoc/",
        SpectacularRedocView.as_view(url_name="schema"),
        name="redoc",
    ),
    # API endpoints, default product scope
    path("api/admin/", include(ADMIN_URLS, namespace="admin-api")),
    path("api/", include(CLIENT_URLS, namespace="client")),
    # API endpoints, explicit product scope
    path(
        "api/v1/<slug:product_scope>/admin/",
        include(ADMIN_URLS, namespace="scoped-admin-api"),
    ),
    path("api/v1/<slug:product_scope>/", include(CLIENT_URLS, namespace="scoped-client")),
]

handler404 = "core.views.not_found"
handler500 = "core.views.server_error"
