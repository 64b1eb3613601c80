from decimal import Decimal

from rest_framework import serializers

from restaurant_backend.base import BaseModelSerializer

from .models import PurchaseOrder, PurchaseOrderItem, StockItem, StockUsageLog
from .services import StockLedgerService


class StockItemSerializer(BaseModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = StockItem
        fields = [
            "id",
            "name",
            "unit",
            "quantity_in_stock",
            "low_stock_threshold",
            "average_cost_per_unit",
            "is_low_stock",
            "updated_at",
        ]
        # Quantities and costs only move through the ledger operations.
        read_only_fields = ["quantity_in_stock", "average_cost_per_unit", "updated_at"]


class StockUsageLogSerializer(BaseModelSerializer):
    stock_item_name = serializers.CharField(source="stock_item.name", read_only=True)
    recorded_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = StockUsageLog
        fields = [
            "id",
            "stock_item",
            "stock_item_name",
            "quantity_used",
            "category",
            "notes",
            "recorded_by",
            "timestamp",
        ]
        read_only_fields = ["timestamp"]
        select_related_fields = ["stock_item", "recorded_by"]

    def validate_quantity_used(self, value):
        if value <= 0:
            raise serializers.ValidationError("Usage quantity must be greater than zero.")
        return value


class PurchaseOrderItemSerializer(BaseModelSerializer):
    class Meta:
        model = PurchaseOrderItem
        fields = ["id", "stock_item", "quantity", "cost_per_unit"]

    def validate_quantity(self, value):
        if value <= Decimal("0"):
            raise serializers.ValidationError("Quantity must be greater than zero.")
        return value


class PurchaseOrderSerializer(BaseModelSerializer):
    items = PurchaseOrderItemSerializer(many=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "supplier_reference",
            "status",
            "total_cost",
            "ordered_at",
            "received_at",
            "items",
        ]
        read_only_fields = ["status", "total_cost", "ordered_at", "received_at"]
        prefetch_related_fields = ["items__stock_item"]

    def create(self, validated_data):
        return StockLedgerService.create_purchase_order(
            validated_data["items"],
            supplier_reference=validated_data.get("supplier_reference", ""),
        )
