import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from restaurant_backend.base import ReadOnlyBaseViewSet
from users.permissions import IsManagerOrHigher, IsStaffMember

from .models import Bill
from .serializers import (
    BillSerializer,
    GatewayConfirmationSerializer,
    GatewayOrderSerializer,
    SettlementSerializer,
    settlement_payload,
)
from .services import BillingService

logger = logging.getLogger(__name__)


class BillViewSet(ReadOnlyBaseViewSet):
    """
    Bills are created per table from served orders and settled once.
    Settling twice answers 409 with code ``already_paid``.
    """

    queryset = Bill.objects.all()
    serializer_class = BillSerializer
    permission_classes = [IsStaffMember]
    filterset_fields = ["status", "table_number"]
    ordering_fields = ["created_at", "total"]
    ordering = ["-created_at"]

    @action(detail=False, methods=["post"], url_path=r"table/(?P<table_number>\d+)")
    def create_for_table(self, request: Request, table_number=None) -> Response:
        bill = BillingService.create_bill_for_table(int(table_number))
        return Response(self.get_serializer(bill).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def pay(self, request: Request, pk=None) -> Response:
        serializer = SettlementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = BillingService.settle_bill(
            pk, payment_reference=serializer.validated_data["payment_reference"]
        )
        return Response(settlement_payload(result))

    @action(detail=True, methods=["post"], url_path="gateway-order")
    def gateway_order(self, request: Request, pk=None) -> Response:
        """Attach the gateway order created to collect this bill online."""
        serializer = GatewayOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        bill = BillingService.start_gateway_payment(pk, serializer.validated_data["gateway_order_id"])
        return Response(self.get_serializer(bill).data)

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
        result = BillingService.confirm_gateway_payment(
            pk, data["gateway_order_id"], data["payment_id"], data["signature"]
        )
        return Response(settlement_payload(result))

    @action(detail=True, methods=["post"], permission_classes=[IsManagerOrHigher])
    def reconcile(self, request: Request, pk=None) -> Response:
        result = BillingService.reconcile_bill(pk)
        return Response(settlement_payload(result))
