from rest_framework import serializers

from orders.models import Order
from restaurant_backend.base import BaseModelSerializer

from .order_item_serializers import OrderItemInputSerializer, OrderItemSerializer


class OrderSerializer(BaseModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    waiter = serializers.SerializerMethodField()
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_type",
            "table_number",
            "status",
            "waiter",
            "created_by",
            "bill",
            "cancellation_reason",
            "items",
            "subtotal",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        prefetch_related_fields = ["items"]

    def get_waiter(self, obj):
        return obj.owner_id


class OrderCreateSerializer(serializers.Serializer):
    order_type = serializers.CharField()
    table_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    items = OrderItemInputSerializer(many=True, allow_empty=True)


class OrderItemsUpdateSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=True)
