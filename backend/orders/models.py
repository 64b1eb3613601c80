import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    # Owner id exposed for orders created directly by a manager.
    MANAGER_OWNER = "manager"

    class OrderStatus(models.TextChoices):
        PENDING = "pending", _("Pending")  # Waiting for manager approval
        APPROVED = "approved", _("Approved")  # Sent to the kitchen
        PREPARED = "prepared", _("Prepared")
        SERVED = "served", _("Served")
        CANCELLED = "cancelled", _("Cancelled")
        BILLED = "billed", _("Billed")  # Rolled into a bill

    class OrderType(models.TextChoices):
        DINE_IN = "dine-in", _("Dine In")
        PICKUP = "pickup", _("Pickup")

    # Statuses that keep a dine-in table occupied.
    BLOCKING_STATUSES = (
        OrderStatus.PENDING,
        OrderStatus.APPROVED,
        OrderStatus.PREPARED,
    )
    TERMINAL_STATUSES = (OrderStatus.CANCELLED, OrderStatus.BILLED)
    EDITABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.APPROVED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_type = models.CharField(max_length=10, choices=OrderType.choices)
    # Denormalized table number; set if and only if the order is dine-in.
    table_number = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )

    waiter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_as_waiter",
        help_text=_("Owning waiter; empty for orders a manager created directly."),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_orders",
    )
    bill = models.ForeignKey(
        "billing.Bill",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text=_("Bill this order was rolled into."),
    )
    cancellation_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["table_number", "status"], name="orders_table_status_idx"),
            models.Index(fields=["waiter", "status"], name="orders_waiter_status_idx"),
            models.Index(fields=["status", "created_at"], name="orders_status_created_idx"),
        ]

    def __str__(self):
        where = f"table {self.table_number}" if self.table_number else self.order_type
        return f"Order {self.id} ({where}, {self.status})"

    @property
    def owner_id(self):
        """Waiter id, or ``"manager"`` for manager-created orders."""
        return self.waiter_id if self.waiter_id is not None else self.MANAGER_OWNER

    @property
    def is_dine_in(self):
        return self.order_type == self.OrderType.DINE_IN

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def subtotal(self):
        return sum(
            (item.line_total for item in self.items.all()), Decimal("0.00")
        )


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    # Snapshot so history stays readable after the menu item is deleted.
    menu_item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_sale = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Unit price captured when the line was added; never changes afterwards."),
    )

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.menu_item_name} @ {self.price_at_sale}"

    @property
    def line_total(self):
        return self.price_at_sale * self.quantity


class OnlineOrder(models.Model):
    """
    An order a customer places and pays for online. It is confirmed only by
    a verified gateway payment and then follows the delivery workflow.
    """

    class Status(models.TextChoices):
        PAYMENT_PENDING = "payment_pending", _("Payment Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        PREPARING = "preparing", _("Preparing")
        OUT_FOR_DELIVERY = "out_for_delivery", _("Out For Delivery")
        DELIVERED = "delivered", _("Delivered")
        CANCELLED = "cancelled", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="online_orders",
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PAYMENT_PENDING
    )
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    gateway_order_id = models.CharField(max_length=100, blank=True)
    payment_id = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "created_at"], name="online_customer_created_idx"),
            models.Index(fields=["status", "created_at"], name="online_status_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["gateway_order_id"],
                condition=~models.Q(gateway_order_id=""),
                name="online_unique_gateway_order",
            ),
            models.UniqueConstraint(
                fields=["payment_id"],
                condition=~models.Q(payment_id=""),
                name="online_unique_payment",
            ),
        ]

    def __str__(self):
        return f"Online order {self.id} ({self.status})"


class OnlineOrderItem(models.Model):
    online_order = models.ForeignKey(OnlineOrder, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="online_order_items",
    )
    menu_item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_at_sale = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.menu_item_name} @ {self.price_at_sale}"

    @property
    def line_total(self):
        return self.price_at_sale * self.quantity
