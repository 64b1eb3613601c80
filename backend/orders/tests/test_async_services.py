"""
Async Service Entry Point Tests

The async wrappers run the same transactional services from async request
handlers and consumers.
"""
import pytest
from decimal import Decimal

from asgiref.sync import sync_to_async

from billing.models import Bill
from billing.services import BillingService
from orders.models import Order
from orders.services import OrderService
from restaurant_backend.exceptions import AlreadyPaid


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestAsyncOrderFlow:

    async def test_create_serve_bill_and_settle(self, waiter_user, table_5, pizza, flour):
        order = await OrderService.acreate_order(
            waiter_user,
            Order.OrderType.DINE_IN,
            [{'menu_item': pizza.id, 'quantity': 1}],
            table_number=5,
        )
        for status in (Order.OrderStatus.APPROVED, Order.OrderStatus.PREPARED, Order.OrderStatus.SERVED):
            result = await OrderService.atransition_status(order, status, actor=waiter_user)
            assert result.order.status == status

        bill = await BillingService.acreate_bill_for_table(5)
        assert bill.total == Decimal('150.00')

        settlement = await BillingService.asettle_bill(bill.id)
        assert settlement.bill.status == Bill.BillStatus.PAID

        await sync_to_async(flour.refresh_from_db)()
        assert flour.quantity_in_stock == Decimal('8')

        with pytest.raises(AlreadyPaid):
            await BillingService.asettle_bill(bill.id)

    async def test_cancel_and_delete(self, waiter_user, table_5, soda):
        first = await OrderService.acreate_order(
            waiter_user, Order.OrderType.DINE_IN, [{'menu_item': soda.id, 'quantity': 1}], table_number=5
        )
        second = await OrderService.acreate_order(
            waiter_user, Order.OrderType.DINE_IN, [{'menu_item': soda.id, 'quantity': 2}], table_number=5
        )

        cancelled = await OrderService.acancel_order(first, reason='Changed mind')
        assert cancelled.status == Order.OrderStatus.CANCELLED

        await OrderService.adelete_order(second)

        await sync_to_async(table_5.refresh_from_db)()
        assert not table_5.is_occupied
        assert await sync_to_async(Order.objects.count)() == 1
