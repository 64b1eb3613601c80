from rest_framework import serializers

from orders.models import OrderItem
from restaurant_backend.base import BaseModelSerializer


class OrderItemSerializer(BaseModelSerializer):
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menu_item", "menu_item_name", "quantity", "price_at_sale", "line_total"]
        read_only_fields = fields


class OrderItemInputSerializer(serializers.Serializer):
    """
    A requested order line. Quantity and menu item existence are checked by
    the service so the whole request is validated before anything is written.
    """

    menu_item = serializers.IntegerField()
    quantity = serializers.IntegerField()
