import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from billing.serializers import GatewayConfirmationSerializer, GatewayOrderSerializer
from orders.models import OnlineOrder
from orders.serializers import (
    OnlineOrderCreateSerializer,
    OnlineOrderSerializer,
    UpdateOrderStatusSerializer,
)
from orders.services import OnlineOrderService
from restaurant_backend.base import BaseViewSet
from users.permissions import IsManagerOrHigher

logger = logging.getLogger(__name__)


class OnlineOrderViewSet(BaseViewSet):
    """
    Online orders placed by customers.

    Customers see and pay for their own orders; managers and admins see
    every order and move it through preparation and delivery. The gateway
    callback confirms payment and needs no login.
    """

    queryset = OnlineOrder.objects.all()
    serializer_class = OnlineOrderSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["status"]
    ordering_fields = ["created_at", "total"]
    ordering = ["-created_at"]
    http_method_names = ["get", "post", "head", "options"]

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        # Other customers' orders answer 404.
        if not user.is_manager_or_higher:
            queryset = queryset.filter(customer=user)
        return queryset

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = OnlineOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        online_order = OnlineOrderService.create_online_order(
            request.user, serializer.validated_data["items"]
        )
        return Response(self.get_serializer(online_order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="gateway-order")
    def gateway_order(self, request: Request, pk=None) -> Response:
        online_order = self.get_object()
        serializer = GatewayOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        online_order = OnlineOrderService.start_payment(
            online_order.pk, serializer.validated_data["gateway_order_id"]
        )
        return Response(self.get_serializer(online_order).data)

    @action(
        detail=True,
        methods=["post"],
        url_path="gateway-confirm",
        permission_classes=[AllowAny],
        authentication_classes=[],
    )
    def gateway_confirm(self, request: Request, pk=None) -> Response:
        """Payment gateway callback; authenticated by its HMAC signature."""
        serializer = GatewayConfirmationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        online_order = OnlineOrderService.confirm_payment(
            pk, data["gateway_order_id"], data["payment_id"], data["signature"]
        )
        return Response(self.get_serializer(online_order).data)

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsManagerOrHigher])
    def update_status(self, request: Request, pk=None) -> Response:
        online_order = self.get_object()
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        online_order = OnlineOrderService.transition_status(
            online_order, serializer.validated_data["status"]
        )
        return Response(self.get_serializer(online_order).data)
