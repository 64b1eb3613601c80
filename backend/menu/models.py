from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class MenuItem(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    is_available = models.BooleanField(
        default=True,
        help_text=_("Unavailable items cannot be added to new orders."),
    )
    cost_of_goods = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Sum of ingredient quantity times stock average cost."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["category", "is_available"], name="menu_category_avail_idx"),
        ]

    def __str__(self):
        return self.name


class MenuItemIngredient(models.Model):
    """
    One line of a menu item's bill of materials: how much of a stock item a
    single serving consumes.
    """

    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.CASCADE, related_name="ingredients"
    )
    # Null once the stock item is deleted; depletion and costing skip it.
    stock_item = models.ForeignKey(
        "inventory.StockItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="menu_ingredients",
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text=_("Quantity of the stock item used per serving, in the stock item's unit."),
    )

    class Meta:
        verbose_name = _("Menu Item Ingredient")
        verbose_name_plural = _("Menu Item Ingredients")

    def __str__(self):
        stock_name = self.stock_item.name if self.stock_item else "deleted stock item"
        return f"{self.quantity} {stock_name} for {self.menu_item.name}"
