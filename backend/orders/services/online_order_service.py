import logging
from decimal import Decimal
from typing import Iterable

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from orders.events import OrderEventPublisher
from orders.models import OnlineOrder, OnlineOrderItem
from restaurant_backend.exceptions import (
    InvalidTransition,
    NotFound,
    PaymentAlreadyUsed,
    ValidationError,
)

from .order_service import OrderService

logger = logging.getLogger(__name__)


class OnlineOrderService:
    """
    Orders customers place and pay for online.

    An online order starts ``payment_pending`` with price-snapshotted lines.
    It becomes ``confirmed`` only through a verified gateway payment, then
    staff move it through preparation and delivery.
    """

    # Confirmation is not listed: only confirm_payment reaches it.
    VALID_STATUS_TRANSITIONS = {
        OnlineOrder.Status.PAYMENT_PENDING: [
            OnlineOrder.Status.CANCELLED,
        ],
        OnlineOrder.Status.CONFIRMED: [
            OnlineOrder.Status.PREPARING,
            OnlineOrder.Status.CANCELLED,
        ],
        OnlineOrder.Status.PREPARING: [
            OnlineOrder.Status.OUT_FOR_DELIVERY,
            OnlineOrder.Status.CANCELLED,
        ],
        OnlineOrder.Status.OUT_FOR_DELIVERY: [
            OnlineOrder.Status.DELIVERED,
        ],
        OnlineOrder.Status.DELIVERED: [],
        OnlineOrder.Status.CANCELLED: [],
    }

    @staticmethod
    def get_online_order(online_order_id) -> OnlineOrder:
        try:
            return OnlineOrder.objects.get(pk=online_order_id)
        except (OnlineOrder.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Online order", online_order_id)

    @staticmethod
    def _lock(online_order_id) -> OnlineOrder:
        try:
            return OnlineOrder.objects.select_for_update().get(pk=online_order_id)
        except (OnlineOrder.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Online order", online_order_id)

    @staticmethod
    @transaction.atomic
    def create_online_order(customer, items: Iterable[dict]) -> OnlineOrder:
        """Creates a payment-pending order at current menu prices."""
        lines = OrderService.resolve_lines(items)
        total = sum((menu_item.price * quantity for menu_item, quantity in lines), Decimal("0.00"))

        online_order = OnlineOrder.objects.create(customer=customer, total=total)
        OnlineOrderItem.objects.bulk_create(
            [
                OnlineOrderItem(
                    online_order=online_order,
                    menu_item=menu_item,
                    menu_item_name=menu_item.name,
                    quantity=quantity,
                    price_at_sale=menu_item.price,
                )
                for menu_item, quantity in lines
            ]
        )

        logger.info(
            f"Online order {online_order.id} created by customer {customer.pk} "
            f"({len(lines)} line(s), total {total})"
        )
        return online_order

    @staticmethod
    @transaction.atomic
    def start_payment(online_order_id, gateway_order_id: str) -> OnlineOrder:
        """Record the gateway order created to collect this online order."""
        # Local import to avoid circular import (billing depends on orders).
        from billing.gateway import GatewaySignatureService

        online_order = OnlineOrderService._lock(online_order_id)
        if online_order.status != OnlineOrder.Status.PAYMENT_PENDING:
            raise InvalidTransition(online_order.status, OnlineOrder.Status.CONFIRMED)
        GatewaySignatureService.ensure_gateway_order_unclaimed(gateway_order_id, online_order=online_order)

        online_order.gateway_order_id = gateway_order_id
        try:
            with transaction.atomic():
                online_order.save(update_fields=["gateway_order_id", "updated_at"])
        except IntegrityError:
            raise ValidationError(f"Gateway order {gateway_order_id} is already attached to another payment")

        logger.info(
            f"Gateway payment {gateway_order_id} started for online order {online_order.id} "
            f"({online_order.total})"
        )
        return online_order

    @staticmethod
    @transaction.atomic
    def confirm_payment(online_order_id, gateway_order_id, payment_id, signature) -> OnlineOrder:
        """
        Confirms a payment-pending order after the same gateway checks that
        settle bills: a valid signature, the gateway order started for this
        order, and a payment id that has not been applied before.
        """
        from billing.gateway import GatewaySignatureService

        online_order = OnlineOrderService._lock(online_order_id)
        if online_order.status != OnlineOrder.Status.PAYMENT_PENDING:
            raise InvalidTransition(online_order.status, OnlineOrder.Status.CONFIRMED)
        GatewaySignatureService.verify_confirmation(
            online_order.gateway_order_id, gateway_order_id, payment_id, signature
        )

        old_status = online_order.status
        online_order.status = OnlineOrder.Status.CONFIRMED
        online_order.payment_id = payment_id
        online_order.confirmed_at = timezone.now()
        try:
            with transaction.atomic():
                online_order.save(update_fields=["status", "payment_id", "confirmed_at", "updated_at"])
        except IntegrityError:
            raise PaymentAlreadyUsed(payment_id)

        logger.info(f"Online order {online_order.id} confirmed by payment {payment_id}")
        OrderEventPublisher.online_order_status_changed(online_order, old_status)
        OrderEventPublisher.online_order_ticket_ready(online_order)
        return online_order

    @staticmethod
    @transaction.atomic
    def transition_status(online_order: OnlineOrder, new_status: str) -> OnlineOrder:
        online_order = OnlineOrderService._lock(online_order.pk)
        allowed = OnlineOrderService.VALID_STATUS_TRANSITIONS.get(online_order.status, [])
        if new_status not in allowed:
            raise InvalidTransition(online_order.status, new_status)

        old_status = online_order.status
        online_order.status = new_status
        online_order.save(update_fields=["status", "updated_at"])

        logger.info(f"Online order {online_order.id} moved from {old_status} to {new_status}")
        OrderEventPublisher.online_order_status_changed(online_order, old_status)
        return online_order

    # --- Async entry points ---

    @staticmethod
    async def acreate_online_order(*args, **kwargs) -> OnlineOrder:
        return await sync_to_async(OnlineOrderService.create_online_order)(*args, **kwargs)

    @staticmethod
    async def aconfirm_payment(*args, **kwargs) -> OnlineOrder:
        return await sync_to_async(OnlineOrderService.confirm_payment)(*args, **kwargs)
