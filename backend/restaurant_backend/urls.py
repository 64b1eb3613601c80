"""
URL configuration for restaurant_backend project.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/auth/", include("users.urls")),
    path("api/menu/", include("menu.urls")),
    path("api/inventory/", include("inventory.urls")),
    path("api/tables/", include("tables.urls")),
    # The orders app registers its base endpoint as 'orders'.
    path("api/", include("orders.urls")),
    path("api/billing/", include("billing.urls")),
    path("api/reports/", include("reports.urls")),
]
