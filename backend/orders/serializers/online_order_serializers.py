from rest_framework import serializers

from orders.models import OnlineOrder, OnlineOrderItem
from restaurant_backend.base import BaseModelSerializer

from .order_item_serializers import OrderItemInputSerializer


class OnlineOrderItemSerializer(BaseModelSerializer):
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OnlineOrderItem
        fields = ["id", "menu_item", "menu_item_name", "quantity", "price_at_sale", "line_total"]
        read_only_fields = fields


class OnlineOrderSerializer(BaseModelSerializer):
    items = OnlineOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = OnlineOrder
        fields = [
            "id",
            "customer",
            "status",
            "total",
            "gateway_order_id",
            "payment_id",
            "items",
            "created_at",
            "updated_at",
            "confirmed_at",
        ]
        read_only_fields = fields
        prefetch_related_fields = ["items"]


class OnlineOrderCreateSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=True)
