import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.filters import OrderFilter
from orders.models import Order
from orders.permissions import IsOrderOwnerOrManager
from orders.serializers import (
    OrderCreateSerializer,
    OrderItemsUpdateSerializer,
    OrderSerializer,
)
from orders.services import OrderService
from restaurant_backend.base import BaseViewSet
from users.permissions import IsStaffMember

from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(StatusActionsMixin, BaseViewSet):
    """
    ViewSet for managing orders.

    Waiters only see the orders they own; managers and admins see every
    order. State changes go through OrderService so table occupancy, bills
    and events stay consistent.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [IsStaffMember, IsOrderOwnerOrManager]
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "table_number", "status"]
    ordering = ["-created_at"]
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        # Detail routes keep the full queryset so foreign orders answer 403, not 404.
        if self.action == "list" and not user.is_manager_or_higher:
            queryset = queryset.filter(waiter=user)
        return queryset

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderService.create_order(
            request.user,
            data["order_type"],
            data["items"],
            table_number=data.get("table_number"),
        )
        return Response(self.get_serializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        return self.items(request, *args, **kwargs)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        order = self.get_object()
        OrderService.delete_order(order)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put"], url_path="items")
    def items(self, request: Request, pk=None) -> Response:
        """Replaces the order's items; only pending and approved orders are editable."""
        order = self.get_object()
        serializer = OrderItemsUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_order_items(order, serializer.validated_data["items"])
        return Response(self.get_serializer(order).data)
