"""
Stock Ledger Tests

Tests for on-hand quantities, weighted-average costing on purchase receipt,
usage logging and depletion of billed lines.
"""
import pytest
from decimal import Decimal

from inventory.models import PurchaseOrder, StockItem, StockUsageLog
from inventory.services import StockLedgerService
from restaurant_backend.exceptions import InvalidTransition, NotFound, ValidationError


@pytest.mark.django_db
class TestWeightedAverageCost:
    """Test average cost recomputation on receipt"""

    def test_receipt_recomputes_weighted_average(self):
        """
        CRITICAL: 5 units at 40 plus 10 units at 50 averages to 46.67

        Business Impact: Cost of goods and margins depend on the average cost
        """
        item = StockItem.objects.create(
            name='Tomatoes',
            unit=StockItem.Unit.KILOGRAM,
            quantity_in_stock=Decimal('5'),
            average_cost_per_unit=Decimal('40'),
        )

        new_average = StockLedgerService.apply_receipt(item.id, Decimal('10'), Decimal('50'))

        item.refresh_from_db()
        assert new_average == Decimal('46.67')
        assert item.average_cost_per_unit == Decimal('46.67')
        assert item.quantity_in_stock == Decimal('15')

    def test_receipt_into_empty_stock_uses_receipt_cost(self):
        item = StockItem.objects.create(name='Basil', unit=StockItem.Unit.GRAM)

        new_average = StockLedgerService.apply_receipt(item.id, 200, Decimal('0.35'))

        assert new_average == Decimal('0.35')

    def test_receipt_into_deeply_negative_stock_uses_receipt_cost(self):
        """
        When the receipt does not bring the balance above zero the average
        falls back to the receipt cost instead of dividing by zero.
        """
        item = StockItem.objects.create(
            name='Milk',
            unit=StockItem.Unit.LITRE,
            quantity_in_stock=Decimal('-4'),
            average_cost_per_unit=Decimal('60'),
        )

        new_average = StockLedgerService.apply_receipt(item.id, 4, Decimal('55'))

        item.refresh_from_db()
        assert new_average == Decimal('55.00')
        assert item.quantity_in_stock == Decimal('0')

    def test_receipt_rejects_non_positive_quantity(self, flour):
        with pytest.raises(ValidationError):
            StockLedgerService.apply_receipt(flour.id, 0, Decimal('10'))

    def test_receipt_for_missing_stock_item(self):
        with pytest.raises(NotFound):
            StockLedgerService.apply_receipt(999999, 1, Decimal('10'))


@pytest.mark.django_db
class TestQuantityAdjustments:
    """Test quantity updates and usage logging"""

    def test_adjust_quantity_allows_negative_balance(self, flour):
        """
        Business Impact: Depletion never blocks a sale, so stock may go negative
        """
        assert StockLedgerService.adjust_quantity(flour.id, Decimal('-12')) is True

        flour.refresh_from_db()
        assert flour.quantity_in_stock == Decimal('-2')

    def test_adjust_quantity_reports_missing_item(self):
        assert StockLedgerService.adjust_quantity(999999, Decimal('-1')) is False

    def test_record_usage_logs_and_decrements(self, cheese, waiter_user):
        log = StockLedgerService.record_usage(
            cheese.id,
            Decimal('250'),
            StockUsageLog.Category.SPILLAGE,
            recorded_by=waiter_user,
            notes='Dropped a tray',
        )

        cheese.refresh_from_db()
        assert cheese.quantity_in_stock == Decimal('4750')
        assert log.category == StockUsageLog.Category.SPILLAGE
        assert log.recorded_by == waiter_user
        assert log.notes == 'Dropped a tray'

    def test_record_usage_rejects_unknown_category(self, cheese):
        with pytest.raises(ValidationError):
            StockLedgerService.record_usage(cheese.id, 1, 'theft')

        cheese.refresh_from_db()
        assert cheese.quantity_in_stock == Decimal('5000')

    def test_low_stock_flag(self, flour):
        assert flour.is_low_stock is False
        StockLedgerService.adjust_quantity(flour.id, Decimal('-8'))
        flour.refresh_from_db()
        assert flour.is_low_stock is True


@pytest.mark.django_db
class TestPurchaseOrderReceipt:
    """Test receiving purchase orders line by line"""

    def test_receive_applies_every_line(self, flour, cheese):
        purchase_order = StockLedgerService.create_purchase_order(
            [
                {'stock_item': flour, 'quantity': Decimal('10'), 'cost_per_unit': Decimal('46')},
                {'stock_item': cheese, 'quantity': Decimal('1000'), 'cost_per_unit': Decimal('0.56')},
            ],
            supplier_reference='Metro Wholesale',
        )
        assert purchase_order.total_cost == Decimal('1020.00')

        result = StockLedgerService.receive_purchase_order(purchase_order.id)

        flour.refresh_from_db()
        cheese.refresh_from_db()
        purchase_order.refresh_from_db()
        assert purchase_order.status == PurchaseOrder.Status.RECEIVED
        assert purchase_order.received_at is not None
        assert flour.quantity_in_stock == Decimal('20')
        assert flour.average_cost_per_unit == Decimal('43.00')
        assert cheese.average_cost_per_unit == Decimal('0.51')
        assert len(result.applied) == 2
        assert result.skipped == []

    def test_deleted_stock_item_line_is_skipped(self, flour, cheese):
        """
        Business Impact: One stale line must not block receiving the rest
        """
        purchase_order = StockLedgerService.create_purchase_order(
            [
                {'stock_item': flour, 'quantity': Decimal('5'), 'cost_per_unit': Decimal('40')},
                {'stock_item': cheese, 'quantity': Decimal('100'), 'cost_per_unit': Decimal('0.50')},
            ]
        )
        cheese.delete()

        result = StockLedgerService.receive_purchase_order(purchase_order.id)

        flour.refresh_from_db()
        assert flour.quantity_in_stock == Decimal('15')
        assert len(result.skipped) == 1

    def test_purchase_order_cannot_be_received_twice(self, flour):
        purchase_order = StockLedgerService.create_purchase_order(
            [{'stock_item': flour, 'quantity': Decimal('1'), 'cost_per_unit': Decimal('40')}]
        )
        StockLedgerService.receive_purchase_order(purchase_order.id)

        with pytest.raises(InvalidTransition):
            StockLedgerService.receive_purchase_order(purchase_order.id)

        flour.refresh_from_db()
        assert flour.quantity_in_stock == Decimal('11')
