"""
URL configuration for core_backend project.

Every POS resource lives under /api/tenants/<tenant_slug>/; TenantMiddleware
resolves the slug before the view runs.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


tenant_patterns = [
    path("", include("orders.urls")),
    path("", include("payments.urls")),
    path("", include("cash_sessions.urls")),
]

urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/tenants/<slug:tenant_slug>/", include(tenant_patterns)),
]
