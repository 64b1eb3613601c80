import logging

from django.db import transaction

from restaurant_backend.exceptions import ValidationError, NotFound

from .models import Table

logger = logging.getLogger(__name__)


class TableService:
    """
    Table occupancy. A table is released only when none of its orders is
    still in a blocking status (pending, approved, prepared).
    """

    @staticmethod
    def find_table_by_number(table_number) -> Table:
        try:
            return Table.objects.get(table_number=table_number)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise NotFound("Table", table_number)

    @staticmethod
    @transaction.atomic
    def create_table(table_number) -> Table:
        if Table.objects.filter(table_number=table_number).exists():
            raise ValidationError(f"Table {table_number} already exists")
        return Table.objects.create(table_number=table_number)

    @staticmethod
    def set_table_status(table: Table, status, waiter=None) -> Table:
        """Manual override; the serving waiter is kept only for occupied tables."""
        if status not in Table.Status.values:
            raise ValidationError(f"Unknown table status '{status}'")

        table.status = status
        table.waiter = waiter if status == Table.Status.OCCUPIED else None
        table.save(update_fields=["status", "waiter", "updated_at"])
        logger.info(f"Table {table.table_number} manually set to {status}")
        return table

    @staticmethod
    def occupy(table_number, waiter=None) -> int:
        """Mark a table occupied by ``waiter`` (None for manager-created orders)."""
        return Table.objects.filter(table_number=table_number).update(
            status=Table.Status.OCCUPIED, waiter=waiter
        )

    @staticmethod
    def release(table_number) -> int:
        """Unconditionally free a table, e.g. once its bill is settled."""
        updated = Table.objects.filter(table_number=table_number).update(
            status=Table.Status.AVAILABLE, waiter=None
        )
        if updated:
            logger.info(f"Table {table_number} released")
        return updated

    @staticmethod
    def is_idle(table_number) -> bool:
        # Local import to avoid circular import (orders depends on tables).
        from orders.models import Order

        return not Order.objects.filter(
            table_number=table_number, status__in=Order.BLOCKING_STATUSES
        ).exists()

    @staticmethod
    def release_if_idle(table_number) -> bool:
        """
        Free the table when no blocking order remains. Returns True if the
        table is now available.
        """
        if table_number is None:
            return False
        if not TableService.is_idle(table_number):
            return False
        TableService.release(table_number)
        return True
