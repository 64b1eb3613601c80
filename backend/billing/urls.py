from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import BillViewSet

router = DefaultRouter()
router.register(r"bills", BillViewSet, basename="bill")

app_name = "billing"

urlpatterns = [
    path("", include(router.urls)),
]
