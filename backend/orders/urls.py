from django.urls import include, path
from rest_framework import routers

from .views import OnlineOrderViewSet, OrderViewSet

app_name = "orders"

router = routers.DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"online-orders", OnlineOrderViewSet, basename="online-order")

urlpatterns = [
    path("", include(router.urls)),
]
