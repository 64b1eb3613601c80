from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class StockItem(models.Model):
    """
    A raw ingredient or supply tracked by the stock ledger.

    ``quantity_in_stock`` is allowed to go negative: depletion never blocks a
    sale, so a negative balance signals stock that was used but not received.
    """

    class Unit(models.TextChoices):
        KILOGRAM = "kg", _("Kilogram")
        GRAM = "g", _("Gram")
        LITRE = "l", _("Litre")
        MILLILITRE = "ml", _("Millilitre")
        PIECE = "piece", _("Piece")

    name = models.CharField(max_length=200, unique=True)
    unit = models.CharField(max_length=10, choices=Unit.choices)
    quantity_in_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        help_text=_("Current on-hand quantity in this item's unit."),
    )
    low_stock_threshold = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        help_text=_("At or below this quantity the item is reported as low on stock."),
    )
    average_cost_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        default=Decimal("0"),
        help_text=_("Weighted-average cost, recomputed on every purchase receipt."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("Stock Item")
        verbose_name_plural = _("Stock Items")

    def __str__(self):
        return f"{self.name} ({self.quantity_in_stock} {self.unit})"

    @property
    def is_low_stock(self):
        return self.quantity_in_stock <= self.low_stock_threshold


class StockUsageLog(models.Model):
    """Manual stock consumption outside of billed orders."""

    class Category(models.TextChoices):
        KITCHEN_PREP = "kitchen_prep", _("Kitchen Prep")
        SPILLAGE = "spillage", _("Spillage")
        STAFF_MEAL = "staff_meal", _("Staff Meal")
        OTHER = "other", _("Other")

    stock_item = models.ForeignKey(
        StockItem, on_delete=models.CASCADE, related_name="usage_logs"
    )
    quantity_used = models.DecimalField(max_digits=12, decimal_places=3)
    category = models.CharField(max_length=20, choices=Category.choices)
    notes = models.TextField(blank=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_usage_logs",
    )
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["stock_item", "timestamp"], name="inv_usage_item_ts_idx"),
            models.Index(fields=["category"], name="inv_usage_category_idx"),
        ]

    def __str__(self):
        return f"{self.quantity_used} of {self.stock_item.name} ({self.category})"


class PurchaseOrder(models.Model):
    class Status(models.TextChoices):
        ORDERED = "ordered", _("Ordered")
        RECEIVED = "received", _("Received")
        CANCELLED = "cancelled", _("Cancelled")

    supplier_reference = models.CharField(
        max_length=200,
        blank=True,
        help_text=_("Free-text supplier name or reference."),
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ORDERED
    )
    total_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    ordered_at = models.DateTimeField(auto_now_add=True)
    received_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-ordered_at"]

    def __str__(self):
        return f"PO #{self.pk} ({self.status})"


class PurchaseOrderItem(models.Model):
    purchase_order = models.ForeignKey(
        PurchaseOrder, on_delete=models.CASCADE, related_name="items"
    )
    # Null once the stock item is deleted; such lines are skipped on receipt.
    stock_item = models.ForeignKey(
        StockItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchase_lines",
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    cost_per_unit = models.DecimalField(max_digits=12, decimal_places=4)

    def __str__(self):
        name = self.stock_item.name if self.stock_item else "deleted item"
        return f"{self.quantity} x {name} @ {self.cost_per_unit}"

    @property
    def line_total(self):
        return self.quantity * self.cost_per_unit
