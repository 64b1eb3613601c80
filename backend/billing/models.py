import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from orders.models import Order


class Bill(models.Model):
    """
    The invoice for one table's served orders, or for a single pickup order.

    Contributing orders point at their bill (``Order.bill``). ``order_ids``
    snapshots them in creation order when the bill is created and never
    changes afterwards.
    """

    class BillStatus(models.TextChoices):
        UNPAID = "unpaid", _("Unpaid")
        PAID = "paid", _("Paid")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Empty for pickup bills.
    table_number = models.PositiveIntegerField(null=True, blank=True, db_index=True)
    waiter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills",
        help_text=_("Waiter credited with the bill (owner of its first order)."),
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=10, choices=BillStatus.choices, default=BillStatus.UNPAID
    )

    payment_reference = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Free-text settlement reference (gateway payment id, card slip number)."),
    )
    order_ids = models.JSONField(default=list, blank=True)
    # Gateway order created when an online payment starts; confirmations must match it.
    gateway_order_id = models.CharField(max_length=100, blank=True)
    gateway_payment_id = models.CharField(max_length=100, blank=True)
    stock_depleted = models.BooleanField(
        default=False,
        help_text=_("False on a paid bill means settlement side effects still need reconciling."),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="billing_status_created_idx"),
            models.Index(fields=["status", "stock_depleted"], name="billing_status_depleted_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["gateway_order_id"],
                condition=~models.Q(gateway_order_id=""),
                name="billing_unique_gateway_order",
            ),
            models.UniqueConstraint(
                fields=["gateway_payment_id"],
                condition=~models.Q(gateway_payment_id=""),
                name="billing_unique_gateway_payment",
            ),
        ]

    def __str__(self):
        where = f"table {self.table_number}" if self.table_number else "pickup"
        return f"Bill {self.id} ({where}, {self.status})"

    @property
    def is_paid(self):
        return self.status == self.BillStatus.PAID

    @property
    def waiter_owner_id(self):
        return self.waiter_id if self.waiter_id is not None else Order.MANAGER_OWNER
