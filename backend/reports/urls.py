from django.urls import include, path
from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register(r"", views.ReportViewSet, basename="reports")

urlpatterns = [
    path("", include(router.urls)),
]

# GET /api/reports/summary/?start_date=2024-01-01&end_date=2024-01-31
