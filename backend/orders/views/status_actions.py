import logging

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import CancelOrderSerializer, UpdateOrderStatusSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        """
        Moves the order to the requested status. When the transition also
        produced a bill (manager marking a pickup order prepared), the bill is
        returned alongside the order.
        """
        order = self.get_object()
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = OrderService.transition_status(
            order, serializer.validated_data["status"], actor=request.user
        )
        data = {"order": self.get_serializer(result.order).data}
        if result.bill is not None:
            # Local import to avoid circular import (billing depends on orders).
            from billing.serializers import BillSerializer

            data["bill"] = BillSerializer(result.bill).data
        return Response(data)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        order = self.get_object()
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.cancel_order(order, reason=serializer.validated_data["reason"])
        return Response(self.get_serializer(order).data)
