from rest_framework import serializers

from restaurant_backend.base import BaseModelSerializer

from .models import Bill


class BillSerializer(BaseModelSerializer):
    waiter = serializers.SerializerMethodField()

    class Meta:
        model = Bill
        fields = [
            "id",
            "table_number",
            "order_ids",
            "waiter",
            "subtotal",
            "tax",
            "total",
            "status",
            "payment_reference",
            "gateway_order_id",
            "stock_depleted",
            "created_at",
            "paid_at",
        ]
        read_only_fields = fields

    def get_waiter(self, obj):
        return obj.waiter_owner_id


class SettlementSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(required=False, allow_blank=True, default="")


class GatewayOrderSerializer(serializers.Serializer):
    gateway_order_id = serializers.CharField(max_length=100)


class GatewayConfirmationSerializer(serializers.Serializer):
    gateway_order_id = serializers.CharField()
    payment_id = serializers.CharField()
    signature = serializers.CharField()


def settlement_payload(result):
    """Response body for a settlement: the bill plus any skipped depletion lines."""
    return {
        "bill": BillSerializer(result.bill).data,
        "stock_reconciled": result.reconciled,
        "skipped_lines": [
            {
                "reason": line.reason,
                "menu_item": line.menu_item_id,
                "stock_item": line.stock_item_id,
                "quantity": str(line.quantity),
            }
            for line in result.skipped
        ],
    }
