import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from asgiref.sync import sync_to_async
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from inventory.services import SkippedLine, StockLedgerService
from orders.events import OrderEventPublisher
from orders.models import Order, OrderItem
from restaurant_backend.exceptions import (
    AlreadyPaid,
    BillingConflict,
    NotFound,
    NothingToBill,
    PaymentAlreadyUsed,
    ValidationError,
)
from tables.services import TableService

from .gateway import GatewaySignatureService
from .models import Bill

logger = logging.getLogger(__name__)


@dataclass
class SettlementResult:
    """
    Outcome of settling a bill. ``reconciled`` is False when the dependent
    effects (table release, stock depletion) failed and were rolled back; the
    bill itself stays paid and ``reconcile_bill`` can re-apply them later.
    """

    bill: Bill
    skipped: List[SkippedLine] = field(default_factory=list)
    reconciled: bool = True


class BillingService:
    """Bill creation and settlement."""

    @staticmethod
    def get_bill(bill_id) -> Bill:
        try:
            return Bill.objects.get(pk=bill_id)
        except (Bill.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Bill", bill_id)

    @staticmethod
    def _bill_orders(orders: List[Order], table_number, expected_status) -> Bill:
        """
        Create a bill for ``orders`` and move them to billed. The status
        update is conditional on ``expected_status``; if another request
        billed any of them first, everything rolls back.
        """
        subtotal = sum(
            (item.line_total for item in OrderItem.objects.filter(order__in=orders)),
            Decimal("0.00"),
        )
        bill = Bill.objects.create(
            table_number=table_number,
            waiter_id=orders[0].waiter_id,
            subtotal=subtotal,
            tax=Decimal("0.00"),
            total=subtotal,
            order_ids=[str(order.pk) for order in orders],
        )

        order_ids = [order.pk for order in orders]
        updated = Order.objects.filter(pk__in=order_ids, status=expected_status).update(
            status=Order.OrderStatus.BILLED, bill=bill, updated_at=timezone.now()
        )
        if updated != len(order_ids):
            raise BillingConflict(
                f"{len(order_ids) - updated} order(s) were billed by another request; retry"
            )

        for order in orders:
            order.status = Order.OrderStatus.BILLED
            order.bill = bill
            OrderEventPublisher.order_status_changed(order, expected_status)

        logger.info(f"Bill {bill.id} created for {len(order_ids)} order(s), total {bill.total}")
        OrderEventPublisher.bill_created(bill, order_ids)
        return bill

    @staticmethod
    @transaction.atomic
    def create_bill_for_table(table_number) -> Bill:
        """
        Bills every served order of a table. The table stays occupied until
        the bill is settled.
        """
        orders = list(
            Order.objects.select_for_update()
            .filter(table_number=table_number, status=Order.OrderStatus.SERVED)
            .order_by("created_at")
        )
        if not orders:
            raise NothingToBill(table_number)

        return BillingService._bill_orders(orders, table_number, Order.OrderStatus.SERVED)

    @staticmethod
    @transaction.atomic
    def create_pickup_bill(order: Order) -> Bill:
        """Bills a single pickup order, which carries no table number."""
        order = Order.objects.select_for_update().get(pk=order.pk)
        if order.order_type != Order.OrderType.PICKUP:
            raise ValidationError("Only pickup orders are billed individually")
        if order.is_terminal:
            raise ValidationError(f"A {order.status} order cannot be billed")

        return BillingService._bill_orders([order], None, order.status)

    @staticmethod
    def _apply_settlement_effects(bill: Bill, reconciling=False) -> SettlementResult:
        """
        Free the table and deplete stock inside a savepoint. A database error
        rolls back only these effects and leaves ``stock_depleted`` False.
        """
        try:
            with transaction.atomic():
                if bill.table_number is not None:
                    if reconciling:
                        # The table may have been seated again since payment.
                        TableService.release_if_idle(bill.table_number)
                    else:
                        TableService.release(bill.table_number)

                items = (
                    OrderItem.objects.filter(order__bill=bill)
                    .select_related("menu_item")
                    .prefetch_related("menu_item__ingredients")
                )
                skipped = StockLedgerService.deplete_for_order_items(items, reference=f"bill {bill.id}")

                Bill.objects.filter(pk=bill.pk).update(stock_depleted=True)
                bill.stock_depleted = True
        except DatabaseError as e:
            logger.error(
                f"Settlement side effects failed for bill {bill.id}; bill stays paid and "
                f"needs reconciliation: {e}"
            )
            return SettlementResult(bill=bill, reconciled=False)

        return SettlementResult(bill=bill, skipped=skipped)

    @staticmethod
    @transaction.atomic
    def settle_bill(bill_id, payment_reference: str = "", gateway_payment_id: str = "") -> SettlementResult:
        """
        Marks a bill paid exactly once, then frees its table (unconditionally)
        and depletes stock for every contributing line.

        Raises AlreadyPaid on a second settlement so the caller can tell a
        duplicate confirmation from a real failure.
        """
        try:
            with transaction.atomic():
                updated = Bill.objects.filter(pk=bill_id, status=Bill.BillStatus.UNPAID).update(
                    status=Bill.BillStatus.PAID,
                    paid_at=timezone.now(),
                    payment_reference=payment_reference or "",
                    gateway_payment_id=gateway_payment_id or "",
                )
        except (DjangoValidationError, ValueError):
            raise NotFound("Bill", bill_id)
        except IntegrityError:
            # Another bill already settled with this gateway payment.
            raise PaymentAlreadyUsed(gateway_payment_id)

        if not updated:
            if Bill.objects.filter(pk=bill_id).exists():
                raise AlreadyPaid(bill_id)
            raise NotFound("Bill", bill_id)

        bill = Bill.objects.get(pk=bill_id)
        result = BillingService._apply_settlement_effects(bill)

        logger.info(
            f"Bill {bill.id} settled ({bill.total}); {len(result.skipped)} depletion line(s) skipped"
        )
        OrderEventPublisher.bill_settled(bill, skipped_lines=len(result.skipped))
        return result

    @staticmethod
    @transaction.atomic
    def settle_pickup_order(order: Order) -> SettlementResult:
        """
        Pickup orders have no table to bill later, so marking one prepared
        bills it and settles the bill in one step.
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        old_status = order.status
        order.status = Order.OrderStatus.PREPARED
        order.save(update_fields=["status", "updated_at"])
        OrderEventPublisher.order_status_changed(order, old_status)

        bill = BillingService.create_pickup_bill(order)
        logger.info(f"Pickup order {order.id} billed on preparation (bill {bill.id})")
        return BillingService.settle_bill(bill.pk)

    @staticmethod
    @transaction.atomic
    def reconcile_bill(bill_id) -> SettlementResult:
        """Re-apply settlement effects for a paid bill whose first attempt failed."""
        try:
            bill = Bill.objects.select_for_update().get(pk=bill_id)
        except (Bill.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Bill", bill_id)

        if not bill.is_paid:
            raise ValidationError("Only paid bills can be reconciled")
        if bill.stock_depleted:
            return SettlementResult(bill=bill)

        result = BillingService._apply_settlement_effects(bill, reconciling=True)
        if result.reconciled:
            logger.info(f"Bill {bill.id} reconciled")
        return result

    @staticmethod
    def bills_needing_reconciliation():
        return Bill.objects.filter(status=Bill.BillStatus.PAID, stock_depleted=False)

    @staticmethod
    @transaction.atomic
    def start_gateway_payment(bill_id, gateway_order_id: str) -> Bill:
        """
        Record the gateway order created to collect this bill. Only a
        confirmation for that gateway order can settle the bill; starting
        again replaces an abandoned attempt.
        """
        try:
            bill = Bill.objects.select_for_update().get(pk=bill_id)
        except (Bill.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Bill", bill_id)

        if bill.is_paid:
            raise AlreadyPaid(bill.pk)
        GatewaySignatureService.ensure_gateway_order_unclaimed(gateway_order_id, bill=bill)

        bill.gateway_order_id = gateway_order_id
        try:
            with transaction.atomic():
                bill.save(update_fields=["gateway_order_id"])
        except IntegrityError:
            raise ValidationError(f"Gateway order {gateway_order_id} is already attached to another payment")
        logger.info(f"Gateway payment {gateway_order_id} started for bill {bill.id} ({bill.total})")
        return bill

    @staticmethod
    @transaction.atomic
    def confirm_gateway_payment(bill_id, gateway_order_id, payment_id, signature) -> SettlementResult:
        """
        Settle a bill after verifying the gateway's payment signature. The
        confirmation must be for the gateway order started for this bill and
        its payment id must not have settled anything before.
        """
        try:
            bill = Bill.objects.select_for_update().get(pk=bill_id)
        except (Bill.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Bill", bill_id)

        if bill.is_paid:
            raise AlreadyPaid(bill.pk)
        GatewaySignatureService.verify_confirmation(
            bill.gateway_order_id, gateway_order_id, payment_id, signature
        )
        return BillingService.settle_bill(
            bill.pk, payment_reference=payment_id, gateway_payment_id=payment_id
        )

    # --- Async entry points ---

    @staticmethod
    async def acreate_bill_for_table(table_number) -> Bill:
        return await sync_to_async(BillingService.create_bill_for_table)(table_number)

    @staticmethod
    async def asettle_bill(bill_id, payment_reference: str = "") -> SettlementResult:
        return await sync_to_async(BillingService.settle_bill)(bill_id, payment_reference)
