from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Table(models.Model):
    """
    A dine-in table. ``status`` is a denormalized view of whether blocking
    orders exist for the table; it is recomputed on every order event that
    can change it.
    """

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")

    table_number = models.PositiveIntegerField(unique=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.AVAILABLE
    )
    waiter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="served_tables",
        help_text=_("Waiter serving the table while it is occupied."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["table_number"]

    def __str__(self):
        return f"Table {self.table_number} ({self.status})"

    @property
    def is_occupied(self):
        return self.status == self.Status.OCCUPIED
