"""
URL configuration for campusBackend project.

All API routes live under /api and have no trailing slash.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from authentication.api.views.metrics_views import metrics

urlpatterns = [
    path("admin/", admin.site.urls),
    # API Documentation
    path("api/schema", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # API endpoints
    path("api/auth/", include("authentication.urls")),
    path("api/", include("chat.urls")),
    path("api/metrics", metrics, name="prometheus-metrics"),
    path("api/", include("marketplace.urls")),
]
