import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from menu.models import MenuItem
from menu.services import MenuCatalogService
from orders.events import OrderEventPublisher
from orders.models import Order, OrderItem
from restaurant_backend.exceptions import (
    InvalidTransition,
    NotFound,
    OrderNotEditable,
    ValidationError,
)
from tables.services import TableService

if TYPE_CHECKING:
    from billing.models import Bill
    from billing.services import SettlementResult

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """Outcome of a status change; ``bill`` is set when the change produced one."""

    order: Order
    bill: Optional["Bill"] = None
    settlement: Optional["SettlementResult"] = None


class OrderService:
    """Core service for order lifecycle management: creating, editing, transitioning and removing orders."""

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.PENDING: [
            Order.OrderStatus.APPROVED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.APPROVED: [
            Order.OrderStatus.PREPARED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.PREPARED: [
            Order.OrderStatus.SERVED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.SERVED: [
            Order.OrderStatus.BILLED,
        ],
        Order.OrderStatus.CANCELLED: [],
        Order.OrderStatus.BILLED: [],
    }

    # Transitions after which the table may have become idle.
    TABLE_RELEASE_STATUSES = (Order.OrderStatus.SERVED, Order.OrderStatus.CANCELLED)

    # Served orders are waiting on a bill and billed ones belong to one.
    UNDELETABLE_STATUSES = (Order.OrderStatus.SERVED, Order.OrderStatus.BILLED)

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Order", order_id)

    @staticmethod
    def resolve_lines(items: Iterable[dict]) -> List[Tuple[MenuItem, int]]:
        """
        Validate requested lines and resolve their menu items. Every line is
        resolved before anything is written, so one bad line aborts the whole
        request.
        """
        items = list(items or [])
        if not items:
            raise ValidationError("An order needs at least one item")

        lines = []
        for item in items:
            menu_item_id = item.get("menu_item")
            quantity = item.get("quantity")
            if menu_item_id is None:
                raise ValidationError("Each item needs a menu item")
            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                raise ValidationError("Item quantity must be a whole number of at least 1")
            lines.append((MenuCatalogService.get_orderable_item(menu_item_id), quantity))
        return lines

    @staticmethod
    def _write_lines(order: Order, lines: List[Tuple[MenuItem, int]]):
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    menu_item=menu_item,
                    menu_item_name=menu_item.name,
                    quantity=quantity,
                    price_at_sale=menu_item.price,
                )
                for menu_item, quantity in lines
            ]
        )

    @staticmethod
    @transaction.atomic
    def create_order(actor, order_type: str, items: Iterable[dict], table_number: Optional[int] = None) -> Order:
        """
        Creates an order with price-snapshotted lines.

        Orders placed by a manager (or admin) skip approval and start
        ``approved`` with no owning waiter. Dine-in orders mark their table
        occupied by the creating waiter.
        """
        if order_type not in Order.OrderType.values:
            raise ValidationError(f"'{order_type}' is not a valid order type")

        if order_type == Order.OrderType.DINE_IN:
            if table_number is None:
                raise ValidationError("Table number is required for dine-in orders")
            TableService.find_table_by_number(table_number)
        else:
            table_number = None

        lines = OrderService.resolve_lines(items)

        created_by_manager = actor.is_manager_or_higher
        waiter = None if created_by_manager else actor
        status = Order.OrderStatus.APPROVED if created_by_manager else Order.OrderStatus.PENDING

        order = Order.objects.create(
            order_type=order_type,
            table_number=table_number,
            status=status,
            waiter=waiter,
            created_by=actor,
        )
        OrderService._write_lines(order, lines)

        if table_number is not None:
            TableService.occupy(table_number, waiter)

        logger.info(
            f"Order {order.id} created by user {actor.pk} ({order_type}, status {status}, "
            f"{len(lines)} line(s))"
        )
        OrderEventPublisher.order_created(order)
        if status == Order.OrderStatus.APPROVED:
            OrderEventPublisher.order_ticket_ready(order)
        return order

    @staticmethod
    @transaction.atomic
    def update_order_items(order: Order, items: Iterable[dict]) -> Order:
        """
        Replaces an order's lines, re-snapshotting prices at current menu
        prices. Only pending and approved orders can be edited.
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.status not in Order.EDITABLE_STATUSES:
            raise OrderNotEditable(order)

        lines = OrderService.resolve_lines(items)
        order.items.all().delete()
        OrderService._write_lines(order, lines)
        order.save(update_fields=["updated_at"])

        logger.info(f"Order {order.id} items replaced ({len(lines)} line(s))")
        return order

    @staticmethod
    @transaction.atomic
    def transition_status(order: Order, new_status: str, actor=None) -> TransitionResult:
        """
        Moves an order along the state machine.

        A pickup order marked prepared by a manager is billed and settled in
        the same transaction (there is no table to bill it against later).
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        allowed = OrderService.VALID_STATUS_TRANSITIONS.get(order.status, [])
        if new_status not in allowed:
            raise InvalidTransition(order.status, new_status)

        if (
            order.order_type == Order.OrderType.PICKUP
            and new_status == Order.OrderStatus.PREPARED
            and actor is not None
            and actor.is_manager_or_higher
        ):
            # Local import to avoid circular import (billing depends on orders).
            from billing.services import BillingService

            settlement = BillingService.settle_pickup_order(order)
            order.refresh_from_db()
            return TransitionResult(order=order, bill=settlement.bill, settlement=settlement)

        old_status = order.status
        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        logger.info(f"Order {order.id} moved from {old_status} to {new_status}")
        OrderEventPublisher.order_status_changed(order, old_status)
        if new_status == Order.OrderStatus.APPROVED:
            OrderEventPublisher.order_ticket_ready(order)

        if new_status in OrderService.TABLE_RELEASE_STATUSES:
            TableService.release_if_idle(order.table_number)

        return TransitionResult(order=order)

    @staticmethod
    @transaction.atomic
    def cancel_order(order: Order, reason: str = "") -> Order:
        """
        Cancels an order from any status and records the reason. Cancelling
        an order that already reached a terminal status is allowed but logged.
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        old_status = order.status
        if order.is_terminal:
            logger.warning(f"Cancelling order {order.id} which was already {old_status}")

        order.status = Order.OrderStatus.CANCELLED
        order.cancellation_reason = reason or ""
        order.save(update_fields=["status", "cancellation_reason", "updated_at"])

        logger.info(f"Order {order.id} cancelled (was {old_status})")
        OrderEventPublisher.order_status_changed(order, old_status)
        TableService.release_if_idle(order.table_number)
        return order

    @staticmethod
    @transaction.atomic
    def delete_order(order: Order) -> None:
        """
        Removes an order permanently and frees its table if nothing else
        holds it. Served and billed orders cannot be deleted.
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.status in OrderService.UNDELETABLE_STATUSES:
            raise OrderNotEditable(order, f"A {order.status} order cannot be deleted")

        table_number = order.table_number
        order_id = order.id
        order.delete()
        logger.info(f"Order {order_id} deleted")
        TableService.release_if_idle(table_number)

    # --- Async entry points ---

    @staticmethod
    async def acreate_order(*args, **kwargs) -> Order:
        return await sync_to_async(OrderService.create_order)(*args, **kwargs)

    @staticmethod
    async def aupdate_order_items(*args, **kwargs) -> Order:
        return await sync_to_async(OrderService.update_order_items)(*args, **kwargs)

    @staticmethod
    async def atransition_status(*args, **kwargs) -> TransitionResult:
        return await sync_to_async(OrderService.transition_status)(*args, **kwargs)

    @staticmethod
    async def acancel_order(*args, **kwargs) -> Order:
        return await sync_to_async(OrderService.cancel_order)(*args, **kwargs)

    @staticmethod
    async def adelete_order(*args, **kwargs) -> None:
        return await sync_to_async(OrderService.delete_order)(*args, **kwargs)
