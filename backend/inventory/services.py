import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from restaurant_backend.exceptions import InvalidTransition, NotFound, ValidationError

from .models import PurchaseOrder, PurchaseOrderItem, StockItem, StockUsageLog

logger = logging.getLogger(__name__)


@dataclass
class SkippedLine:
    """A depletion or receipt line that could not be applied."""

    reason: str
    menu_item_id: Optional[int] = None
    stock_item_id: Optional[int] = None
    quantity: Decimal = Decimal("0")


@dataclass
class ReceiptResult:
    purchase_order: PurchaseOrder
    applied: List[int] = field(default_factory=list)
    skipped: List[SkippedLine] = field(default_factory=list)


def quantize_cost(value: Decimal) -> Decimal:
    """Round a unit cost to the configured precision (half-up)."""
    precision = getattr(settings, "STOCK_COST_PRECISION", Decimal("0.01"))
    return Decimal(value).quantize(precision, rounding=ROUND_HALF_UP)


class StockLedgerService:
    """
    On-hand quantities and weighted-average costs of stock items.

    Quantity changes are applied with ``F()`` updates so concurrent
    depletions never lose each other's writes. The average cost is a
    read-modify-write and therefore runs under ``select_for_update``.
    """

    @staticmethod
    def get_stock_item(stock_item_id) -> StockItem:
        try:
            return StockItem.objects.get(pk=stock_item_id)
        except StockItem.DoesNotExist:
            raise NotFound("Stock item", stock_item_id)

    @staticmethod
    def adjust_quantity(stock_item_id, delta) -> bool:
        """
        Atomically add ``delta`` (negative to decrement) to the on-hand
        quantity. No floor is applied. Returns False when the stock item does
        not exist.
        """
        updated = StockItem.objects.filter(pk=stock_item_id).update(
            quantity_in_stock=F("quantity_in_stock") + Decimal(str(delta))
        )
        return updated == 1

    @staticmethod
    @transaction.atomic
    def record_usage(stock_item_id, quantity, category, recorded_by=None, notes="") -> StockUsageLog:
        """
        Record stock consumed outside of a bill (prep, spillage, staff meals)
        and decrement the on-hand quantity by the same amount.
        """
        quantity = Decimal(str(quantity))
        if quantity <= 0:
            raise ValidationError("Usage quantity must be greater than zero")
        if category not in StockUsageLog.Category.values:
            raise ValidationError(f"Unknown usage category '{category}'")

        stock_item = StockLedgerService.get_stock_item(stock_item_id)
        log = StockUsageLog.objects.create(
            stock_item=stock_item,
            quantity_used=quantity,
            category=category,
            notes=notes or "",
            recorded_by=recorded_by,
        )
        StockLedgerService.adjust_quantity(stock_item.pk, -quantity)

        logger.info(
            f"Recorded {category} usage of {quantity} {stock_item.unit} for stock item {stock_item.pk}"
        )
        return log

    @staticmethod
    @transaction.atomic
    def apply_receipt(stock_item_id, quantity, cost_per_unit) -> Decimal:
        """
        Receive ``quantity`` units bought at ``cost_per_unit`` and return the
        new weighted-average cost:

            (old_qty * old_avg + qty * cost) / (old_qty + qty)

        When the resulting quantity is not positive (stock was already deep in
        the negative) the receipt cost becomes the average.
        """
        quantity = Decimal(str(quantity))
        cost_per_unit = Decimal(str(cost_per_unit))
        if quantity <= 0:
            raise ValidationError("Received quantity must be greater than zero")
        if cost_per_unit < 0:
            raise ValidationError("Cost per unit cannot be negative")

        try:
            stock_item = StockItem.objects.select_for_update().get(pk=stock_item_id)
        except StockItem.DoesNotExist:
            raise NotFound("Stock item", stock_item_id)

        old_quantity = stock_item.quantity_in_stock
        new_quantity = old_quantity + quantity
        if new_quantity > 0:
            total_value = old_quantity * stock_item.average_cost_per_unit + quantity * cost_per_unit
            new_average = quantize_cost(total_value / new_quantity)
        else:
            new_average = quantize_cost(cost_per_unit)

        stock_item.quantity_in_stock = new_quantity
        stock_item.average_cost_per_unit = new_average
        stock_item.save(update_fields=["quantity_in_stock", "average_cost_per_unit", "updated_at"])

        logger.info(
            f"Received {quantity} of stock item {stock_item.pk} at {cost_per_unit}; "
            f"average cost now {new_average}"
        )
        return new_average

    @staticmethod
    @transaction.atomic
    def create_purchase_order(lines, supplier_reference="") -> PurchaseOrder:
        """
        ``lines`` is an iterable of dicts with ``stock_item``, ``quantity``
        and ``cost_per_unit``.
        """
        lines = list(lines)
        if not lines:
            raise ValidationError("A purchase order needs at least one line")

        purchase_order = PurchaseOrder.objects.create(supplier_reference=supplier_reference)
        total = Decimal("0.00")
        for line in lines:
            item = PurchaseOrderItem.objects.create(
                purchase_order=purchase_order,
                stock_item=line["stock_item"],
                quantity=line["quantity"],
                cost_per_unit=line["cost_per_unit"],
            )
            total += item.line_total

        purchase_order.total_cost = total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        purchase_order.save(update_fields=["total_cost"])
        return purchase_order

    @staticmethod
    @transaction.atomic
    def receive_purchase_order(purchase_order_id) -> ReceiptResult:
        """
        Apply every line of an ordered purchase order to the ledger. Lines
        are independent: a line whose stock item no longer exists is skipped
        and logged, the others still update quantity and average cost.
        """
        try:
            purchase_order = PurchaseOrder.objects.select_for_update().get(pk=purchase_order_id)
        except PurchaseOrder.DoesNotExist:
            raise NotFound("Purchase order", purchase_order_id)

        if purchase_order.status != PurchaseOrder.Status.ORDERED:
            raise InvalidTransition(purchase_order.status, PurchaseOrder.Status.RECEIVED)

        result = ReceiptResult(purchase_order=purchase_order)
        for line in purchase_order.items.all():
            if line.stock_item_id is None:
                result.skipped.append(
                    SkippedLine(reason="stock item no longer exists", quantity=line.quantity)
                )
                logger.warning(
                    f"Purchase order {purchase_order.pk}: skipping line {line.pk}, stock item was deleted"
                )
                continue
            StockLedgerService.apply_receipt(line.stock_item_id, line.quantity, line.cost_per_unit)
            result.applied.append(line.stock_item_id)

        purchase_order.status = PurchaseOrder.Status.RECEIVED
        purchase_order.received_at = timezone.now()
        purchase_order.save(update_fields=["status", "received_at"])
        return result

    @staticmethod
    def deplete_for_order_items(order_items, reference="") -> List[SkippedLine]:
        """
        Decrement every ingredient of every billed line by
        ``ingredient.quantity * line.quantity``.

        Lines whose menu item was deleted, and ingredients whose stock record
        is gone, are skipped. The skipped lines are returned so callers can
        surface them; they never block the sale.
        """
        skipped = []
        for order_item in order_items:
            menu_item = order_item.menu_item
            if menu_item is None:
                skipped.append(
                    SkippedLine(reason="menu item no longer exists", quantity=Decimal(order_item.quantity))
                )
                continue

            for ingredient in menu_item.ingredients.all():
                used = ingredient.quantity * order_item.quantity
                if ingredient.stock_item_id is None or not StockLedgerService.adjust_quantity(
                    ingredient.stock_item_id, -used
                ):
                    skipped.append(
                        SkippedLine(
                            reason="stock item no longer exists",
                            menu_item_id=menu_item.pk,
                            stock_item_id=ingredient.stock_item_id,
                            quantity=used,
                        )
                    )

        for line in skipped:
            logger.warning(
                f"Stock depletion for {reference or 'bill'} skipped a line: {line.reason} "
                f"(menu item {line.menu_item_id}, stock item {line.stock_item_id}, qty {line.quantity})"
            )
        return skipped
