"""
Order Lifecycle Tests

These tests verify order creation, the status state machine, cancellation,
deletion and their effects on table occupancy.

Priority: HIGH - Orders drive the kitchen, the tables and billing
"""
import pytest
from decimal import Decimal

from billing.models import Bill
from billing.services import SettlementResult
from menu.models import MenuItem
from orders.events import OrderCreated, TicketReady, order_created, ticket_ready
from orders.models import Order
from orders.services import OrderService
from restaurant_backend.exceptions import (
    InvalidTransition,
    NotFound,
    OrderNotEditable,
    Unavailable,
    ValidationError,
)
from tables.models import Table


def _dine_in(actor, menu_item, quantity=1, table_number=5):
    return OrderService.create_order(
        actor,
        Order.OrderType.DINE_IN,
        [{'menu_item': menu_item.id, 'quantity': quantity}],
        table_number=table_number,
    )


@pytest.mark.django_db
class TestOrderCreation:
    """Test order creation, validation and price snapshots"""

    def test_waiter_dine_in_order_occupies_table(self, waiter_user, table_5, pizza):
        """
        CRITICAL: A waiter's dine-in order starts pending and occupies the table

        Business Impact: Hosts must not seat another party at an occupied table
        """
        order = _dine_in(waiter_user, pizza, quantity=2)

        assert order.status == Order.OrderStatus.PENDING
        assert order.waiter == waiter_user
        assert order.owner_id == waiter_user.id
        assert order.subtotal == Decimal('300.00')

        table_5.refresh_from_db()
        assert table_5.status == Table.Status.OCCUPIED
        assert table_5.waiter == waiter_user

    def test_manager_order_is_approved_with_manager_owner(self, manager_user, table_5, soda):
        order = _dine_in(manager_user, soda)

        assert order.status == Order.OrderStatus.APPROVED
        assert order.waiter is None
        assert order.owner_id == Order.MANAGER_OWNER
        assert order.created_by == manager_user

        table_5.refresh_from_db()
        assert table_5.is_occupied
        assert table_5.waiter is None

    def test_prices_are_snapshotted(self, waiter_user, table_5, soda):
        """
        Business Impact: Menu price changes must never alter existing orders
        """
        order = _dine_in(waiter_user, soda)

        MenuItem.objects.filter(pk=soda.pk).update(price=Decimal('95.00'))

        item = order.items.get()
        assert item.price_at_sale == Decimal('80.00')
        assert item.menu_item_name == 'Soda'

    def test_pickup_order_drops_table_number(self, waiter_user, soda):
        order = OrderService.create_order(
            waiter_user, Order.OrderType.PICKUP, [{'menu_item': soda.id, 'quantity': 1}], table_number=3
        )

        assert order.table_number is None

    def test_dine_in_requires_table_number(self, waiter_user, soda):
        with pytest.raises(ValidationError):
            OrderService.create_order(
                waiter_user, Order.OrderType.DINE_IN, [{'menu_item': soda.id, 'quantity': 1}]
            )

    def test_dine_in_requires_existing_table(self, waiter_user, soda):
        with pytest.raises(NotFound):
            _dine_in(waiter_user, soda, table_number=42)

    @pytest.mark.parametrize('items', [[], [{'menu_item': 1, 'quantity': 0}]])
    def test_invalid_items_rejected(self, waiter_user, table_5, items):
        with pytest.raises(ValidationError):
            OrderService.create_order(waiter_user, Order.OrderType.DINE_IN, items, table_number=5)

    def test_unknown_order_type_rejected(self, waiter_user, soda):
        with pytest.raises(ValidationError):
            OrderService.create_order(waiter_user, 'delivery', [{'menu_item': soda.id, 'quantity': 1}])

    def test_unavailable_item_aborts_whole_order(self, waiter_user, table_5, soda, unavailable_item):
        """
        Business Impact: A partially created order would mislead the kitchen
        """
        with pytest.raises(Unavailable):
            OrderService.create_order(
                waiter_user,
                Order.OrderType.DINE_IN,
                [
                    {'menu_item': soda.id, 'quantity': 1},
                    {'menu_item': unavailable_item.id, 'quantity': 1},
                ],
                table_number=5,
            )

        assert Order.objects.count() == 0
        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE

    def test_missing_menu_item_aborts_order(self, waiter_user, table_5):
        with pytest.raises(NotFound):
            _dine_in(waiter_user, MenuItem(id=987654, name='Ghost', price=Decimal('1')))

        assert Order.objects.count() == 0


@pytest.mark.django_db
class TestOrderTransitions:
    """Test the order state machine"""

    def test_full_dine_in_sequence(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)

        for status in (Order.OrderStatus.APPROVED, Order.OrderStatus.PREPARED, Order.OrderStatus.SERVED):
            result = OrderService.transition_status(order, status, actor=waiter_user)
            assert result.order.status == status
            assert result.bill is None

    def test_pending_cannot_skip_to_served(self, waiter_user, table_5, soda):
        """
        CRITICAL: Invalid transitions are rejected and the order is unchanged
        """
        order = _dine_in(waiter_user, soda)

        with pytest.raises(InvalidTransition) as exc_info:
            OrderService.transition_status(order, Order.OrderStatus.SERVED, actor=waiter_user)

        assert exc_info.value.current == Order.OrderStatus.PENDING
        assert exc_info.value.requested == Order.OrderStatus.SERVED
        assert str(exc_info.value) == 'Cannot transition from pending to served'
        order.refresh_from_db()
        assert order.status == Order.OrderStatus.PENDING

    @pytest.mark.parametrize('terminal', [Order.OrderStatus.CANCELLED, Order.OrderStatus.BILLED])
    def test_terminal_statuses_have_no_exits(self, waiter_user, table_5, soda, terminal):
        order = _dine_in(waiter_user, soda)
        Order.objects.filter(pk=order.pk).update(status=terminal)

        with pytest.raises(InvalidTransition):
            OrderService.transition_status(order, Order.OrderStatus.APPROVED, actor=waiter_user)

    def test_unknown_status_is_invalid_transition(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)

        with pytest.raises(InvalidTransition):
            OrderService.transition_status(order, 'teleported', actor=waiter_user)

    def test_table_released_when_last_blocking_order_served(self, waiter_user, table_5, pizza, soda):
        """
        Business Impact: Tables free up as soon as nothing is left in the kitchen
        """
        first = _dine_in(waiter_user, pizza)
        second = _dine_in(waiter_user, soda)
        for status in (Order.OrderStatus.APPROVED, Order.OrderStatus.PREPARED, Order.OrderStatus.SERVED):
            OrderService.transition_status(first, status, actor=waiter_user)

        table_5.refresh_from_db()
        assert table_5.is_occupied

        OrderService.cancel_order(second, reason='Guest left')

        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE
        assert table_5.waiter is None

    def test_served_table_can_show_available_before_billing(self, served_table_orders, table_5):
        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE
        assert all(order.status == Order.OrderStatus.SERVED for order in served_table_orders)

    def test_manager_pickup_prepared_bills_and_settles(self, manager_user, pizza, flour):
        """
        CRITICAL: A manager marking a pickup order prepared bills and settles it

        Business Impact: Pickup orders have no table to bill later
        """
        order = OrderService.create_order(
            manager_user, Order.OrderType.PICKUP, [{'menu_item': pizza.id, 'quantity': 1}]
        )

        result = OrderService.transition_status(order, Order.OrderStatus.PREPARED, actor=manager_user)

        assert result.order.status == Order.OrderStatus.BILLED
        bill = result.bill
        assert isinstance(bill, Bill)
        assert isinstance(result.settlement, SettlementResult)
        assert result.settlement.bill.pk == bill.pk
        assert bill.status == Bill.BillStatus.PAID
        assert bill.table_number is None
        assert bill.total == Decimal('150.00')
        assert bill.tax == Decimal('0.00')
        assert [str(order_id) for order_id in bill.order_ids] == [str(order.id)]

        flour.refresh_from_db()
        assert flour.quantity_in_stock == Decimal('8')

    def test_waiter_pickup_prepared_does_not_bill(self, waiter_user, manager_user, soda):
        order = OrderService.create_order(
            waiter_user, Order.OrderType.PICKUP, [{'menu_item': soda.id, 'quantity': 1}]
        )
        OrderService.transition_status(order, Order.OrderStatus.APPROVED, actor=manager_user)

        result = OrderService.transition_status(order, Order.OrderStatus.PREPARED, actor=waiter_user)

        assert result.order.status == Order.OrderStatus.PREPARED
        assert result.bill is None
        assert Bill.objects.count() == 0


@pytest.mark.django_db
class TestOrderCancellationAndDeletion:

    def test_cancel_records_reason_and_frees_table(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)

        order = OrderService.cancel_order(order, reason='Customer changed mind')

        assert order.status == Order.OrderStatus.CANCELLED
        assert order.cancellation_reason == 'Customer changed mind'
        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE

    def test_cancel_is_allowed_from_terminal_status(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)
        Order.objects.filter(pk=order.pk).update(status=Order.OrderStatus.BILLED)

        order = OrderService.cancel_order(order, reason='Entered by mistake')

        assert order.status == Order.OrderStatus.CANCELLED

    def test_delete_frees_table_when_last_blocking_order(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)

        OrderService.delete_order(order)

        assert not Order.objects.filter(pk=order.pk).exists()
        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE

    def test_delete_keeps_table_with_other_blocking_orders(self, waiter_user, table_5, soda, pizza):
        order = _dine_in(waiter_user, soda)
        _dine_in(waiter_user, pizza)

        OrderService.delete_order(order)

        table_5.refresh_from_db()
        assert table_5.is_occupied

    def test_served_and_billed_orders_cannot_be_deleted(self, served_table_orders, flour):
        """
        CRITICAL: Deleting an order must not rewrite a bill

        Business Impact: A deleted billed order would vanish from the bill
        total and never deplete its stock
        """
        from billing.services import BillingService

        first = served_table_orders[0]
        bill = BillingService.create_bill_for_table(5)
        first.refresh_from_db()
        assert first.status == Order.OrderStatus.BILLED

        with pytest.raises(OrderNotEditable) as exc_info:
            OrderService.delete_order(first)
        assert str(exc_info.value) == 'A billed order cannot be deleted'

        result = BillingService.settle_bill(bill.id)

        assert result.bill.order_ids == [str(order.id) for order in served_table_orders]
        assert Order.objects.filter(bill=bill).count() == 2
        flour.refresh_from_db()
        assert flour.quantity_in_stock == Decimal('6')

    def test_served_order_cannot_be_deleted(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)
        for status in (Order.OrderStatus.APPROVED, Order.OrderStatus.PREPARED, Order.OrderStatus.SERVED):
            OrderService.transition_status(order, status, actor=waiter_user)

        with pytest.raises(OrderNotEditable):
            OrderService.delete_order(order)

        assert Order.objects.filter(pk=order.pk).exists()


@pytest.mark.django_db
class TestOrderItemUpdates:

    def test_update_items_reprices_lines(self, waiter_user, table_5, soda, pizza):
        order = _dine_in(waiter_user, soda)
        MenuItem.objects.filter(pk=pizza.pk).update(price=Decimal('160.00'))

        order = OrderService.update_order_items(order, [{'menu_item': pizza.id, 'quantity': 2}])

        item = order.items.get()
        assert item.menu_item_id == pizza.id
        assert item.price_at_sale == Decimal('160.00')
        assert order.status == Order.OrderStatus.PENDING

    def test_items_locked_after_preparation(self, waiter_user, table_5, soda):
        order = _dine_in(waiter_user, soda)
        OrderService.transition_status(order, Order.OrderStatus.APPROVED, actor=waiter_user)
        OrderService.transition_status(order, Order.OrderStatus.PREPARED, actor=waiter_user)

        with pytest.raises(OrderNotEditable):
            OrderService.update_order_items(order, [{'menu_item': soda.id, 'quantity': 3}])

        assert order.items.get().quantity == 1


@pytest.mark.django_db
class TestOrderEvents:
    """Events are delivered once the transaction commits"""

    def test_manager_order_publishes_created_and_ticket(
        self, manager_user, table_5, soda, django_capture_on_commit_callbacks
    ):
        received = []

        def collect(sender, event, **kwargs):
            received.append(event)

        order_created.connect(collect)
        ticket_ready.connect(collect)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                order = _dine_in(manager_user, soda)
        finally:
            order_created.disconnect(collect)
            ticket_ready.disconnect(collect)

        created = [event for event in received if isinstance(event, OrderCreated)]
        tickets = [event for event in received if isinstance(event, TicketReady)]
        assert len(created) == 1
        assert created[0].order_id == str(order.id)
        assert created[0].owner_id == Order.MANAGER_OWNER
        assert len(tickets) == 1
        assert tickets[0].kind == TicketReady.KIND_ORDER

    def test_failing_receiver_does_not_break_order_creation(
        self, waiter_user, table_5, soda, django_capture_on_commit_callbacks
    ):
        def broken(sender, event, **kwargs):
            raise RuntimeError('printer offline')

        order_created.connect(broken)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                order = _dine_in(waiter_user, soda)
        finally:
            order_created.disconnect(broken)

        assert Order.objects.filter(pk=order.pk).exists()
