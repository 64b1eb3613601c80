from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from restaurant_backend.base import BaseViewSet
from restaurant_backend.pagination import StandardPagination
from users.permissions import IsManagerOrHigher, IsStaffMember

from .models import PurchaseOrder, StockItem, StockUsageLog
from .serializers import (
    PurchaseOrderSerializer,
    StockItemSerializer,
    StockUsageLogSerializer,
)
from .services import StockLedgerService


class StockItemViewSet(BaseViewSet):
    """
    Stock items. Everyone on staff can read levels; managers maintain the
    catalog of stock items.
    """

    queryset = StockItem.objects.all()
    serializer_class = StockItemSerializer
    filterset_fields = ["unit"]
    search_fields = ["name"]
    ordering_fields = ["name", "quantity_in_stock"]
    ordering = ["name"]

    def get_permissions(self):
        if self.action in ("list", "retrieve", "low_stock"):
            return [IsStaffMember()]
        return [IsManagerOrHigher()]

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        items = [item for item in self.filter_queryset(self.get_queryset()) if item.is_low_stock]
        return Response(self.get_serializer(items, many=True).data)


class StockUsageLogViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = StockUsageLog.objects.select_related("stock_item", "recorded_by")
    serializer_class = StockUsageLogSerializer
    permission_classes = [IsStaffMember]
    pagination_class = StandardPagination
    filterset_fields = ["stock_item", "category"]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        log = StockLedgerService.record_usage(
            data["stock_item"].pk,
            data["quantity_used"],
            data["category"],
            recorded_by=request.user,
            notes=data.get("notes", ""),
        )
        return Response(self.get_serializer(log).data, status=status.HTTP_201_CREATED)


class PurchaseOrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = PurchaseOrder.objects.prefetch_related("items__stock_item")
    serializer_class = PurchaseOrderSerializer
    permission_classes = [IsManagerOrHigher]
    pagination_class = StandardPagination
    filterset_fields = ["status"]

    @action(detail=True, methods=["post"])
    def receive(self, request, pk=None):
        result = StockLedgerService.receive_purchase_order(pk)
        purchase_order = self.get_queryset().get(pk=result.purchase_order.pk)
        return Response(
            {
                "purchase_order": self.get_serializer(purchase_order).data,
                "skipped_lines": len(result.skipped),
            }
        )
