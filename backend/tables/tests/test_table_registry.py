"""
Table Registry Tests

Tests for table occupancy and the release-if-idle rule.
"""
import pytest

from orders.models import Order
from orders.services import OrderService
from restaurant_backend.exceptions import NotFound, ValidationError
from tables.models import Table
from tables.services import TableService


@pytest.mark.django_db
class TestTableLookup:

    def test_find_table_by_number(self, table_5):
        assert TableService.find_table_by_number(5) == table_5

    def test_missing_table(self):
        with pytest.raises(NotFound):
            TableService.find_table_by_number(99)

    def test_duplicate_table_number_rejected(self, table_5):
        with pytest.raises(ValidationError):
            TableService.create_table(5)


@pytest.mark.django_db
class TestTableStatus:

    def test_manual_status_keeps_waiter_only_when_occupied(self, table_5, waiter_user):
        TableService.set_table_status(table_5, Table.Status.OCCUPIED, waiter=waiter_user)
        table_5.refresh_from_db()
        assert table_5.is_occupied
        assert table_5.waiter == waiter_user

        TableService.set_table_status(table_5, Table.Status.AVAILABLE, waiter=waiter_user)
        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE
        assert table_5.waiter is None

    def test_release_if_idle_keeps_table_with_blocking_order(self, table_5, waiter_user, soda):
        """
        Business Impact: A table with food still on the way must not be reseated
        """
        OrderService.create_order(
            waiter_user, Order.OrderType.DINE_IN, [{'menu_item': soda.id, 'quantity': 1}], table_number=5
        )

        assert TableService.release_if_idle(5) is False
        table_5.refresh_from_db()
        assert table_5.is_occupied

    def test_release_if_idle_frees_table_without_blocking_orders(self, table_5, waiter_user):
        TableService.occupy(5, waiter_user)

        assert TableService.release_if_idle(5) is True
        table_5.refresh_from_db()
        assert table_5.status == Table.Status.AVAILABLE
        assert table_5.waiter is None

    def test_release_if_idle_ignores_pickup(self):
        assert TableService.release_if_idle(None) is False


@pytest.mark.django_db
class TestTablesAPI:

    def test_manager_creates_table(self, manager_client):
        response = manager_client.post('/api/tables/', {'table_number': 12}, format='json')

        assert response.status_code == 201
        assert response.data['status'] == 'available'
        assert Table.objects.filter(table_number=12).exists()

    def test_waiter_cannot_create_table(self, waiter_client):
        response = waiter_client.post('/api/tables/', {'table_number': 12}, format='json')

        assert response.status_code == 403

    def test_waiter_marks_table_occupied(self, waiter_client, waiter_user, table_5):
        response = waiter_client.patch(f'/api/tables/{table_5.pk}/status/', {'status': 'occupied'}, format='json')

        assert response.status_code == 200
        assert response.data['status'] == 'occupied'
        assert response.data['waiter_detail']['email'] == waiter_user.email

    def test_only_admin_deletes_tables(self, manager_client, client_for, admin_staff_user, table_5):
        assert manager_client.delete(f'/api/tables/{table_5.pk}/').status_code == 403
        assert client_for(admin_staff_user).delete(f'/api/tables/{table_5.pk}/').status_code == 204
