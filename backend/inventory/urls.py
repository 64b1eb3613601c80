from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PurchaseOrderViewSet, StockItemViewSet, StockUsageLogViewSet

router = DefaultRouter()
router.register(r"stock-items", StockItemViewSet, basename="stock-item")
router.register(r"usage-logs", StockUsageLogViewSet, basename="usage-log")
router.register(r"purchase-orders", PurchaseOrderViewSet, basename="purchase-order")

app_name = "inventory"

urlpatterns = [
    path("", include(router.urls)),
]
