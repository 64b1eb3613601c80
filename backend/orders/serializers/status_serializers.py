from rest_framework import serializers


class UpdateOrderStatusSerializer(serializers.Serializer):
    """
    Requested target status. Left as free text: whether the change is an
    edge of the state machine is decided by OrderService.
    """

    status = serializers.CharField()


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
