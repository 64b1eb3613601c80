"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like staff users, tables, stock items and menu items.
"""
import pytest
from decimal import Decimal

from users.models import User
from tables.models import Table
from inventory.models import StockItem
from menu.models import MenuItem, MenuItemIngredient


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def waiter_user(db):
    """Create a waiter"""
    return User.objects.create_user(
        email='waiter@restaurant.com',
        password='password123',
        name='Wendy Waiter',
        role=User.Role.WAITER,
    )


@pytest.fixture
def second_waiter_user(db):
    """Create a second waiter for ownership tests"""
    return User.objects.create_user(
        email='waiter2@restaurant.com',
        password='password123',
        name='Walt Waiter',
        role=User.Role.WAITER,
    )


@pytest.fixture
def manager_user(db):
    """Create a manager"""
    return User.objects.create_user(
        email='manager@restaurant.com',
        password='password123',
        name='Morgan Manager',
        role=User.Role.MANAGER,
    )


@pytest.fixture
def admin_staff_user(db):
    """Create an admin"""
    return User.objects.create_user(
        email='admin@restaurant.com',
        password='password123',
        name='Alex Admin',
        role=User.Role.ADMIN,
    )


@pytest.fixture
def customer_user(db):
    """Create a customer who orders online"""
    return User.objects.create_user(
        email='customer@example.com',
        password='password123',
        name='Casey Customer',
        role=User.Role.CUSTOMER,
    )


@pytest.fixture
def second_customer_user(db):
    """Create a second customer for ownership tests"""
    return User.objects.create_user(
        email='customer2@example.com',
        password='password123',
        name='Cody Customer',
        role=User.Role.CUSTOMER,
    )


# ============================================================================
# TABLE FIXTURES
# ============================================================================

@pytest.fixture
def table_5(db):
    """Create available table number 5"""
    return Table.objects.create(table_number=5)


@pytest.fixture
def table_7(db):
    """Create available table number 7"""
    return Table.objects.create(table_number=7)


# ============================================================================
# STOCK FIXTURES
# ============================================================================

@pytest.fixture
def flour(db):
    """Flour: 10 kg on hand at 40.00 per kg"""
    return StockItem.objects.create(
        name='Flour',
        unit=StockItem.Unit.KILOGRAM,
        quantity_in_stock=Decimal('10'),
        low_stock_threshold=Decimal('2'),
        average_cost_per_unit=Decimal('40.00'),
    )


@pytest.fixture
def cheese(db):
    """Cheese: 5000 g on hand at 0.50 per g"""
    return StockItem.objects.create(
        name='Cheese',
        unit=StockItem.Unit.GRAM,
        quantity_in_stock=Decimal('5000'),
        low_stock_threshold=Decimal('500'),
        average_cost_per_unit=Decimal('0.50'),
    )


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def pizza(flour, cheese):
    """Pizza at 150.00 using 2 kg flour and 100 g cheese per serving"""
    item = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('150.00'), category='Mains')
    MenuItemIngredient.objects.create(menu_item=item, stock_item=flour, quantity=Decimal('2'))
    MenuItemIngredient.objects.create(menu_item=item, stock_item=cheese, quantity=Decimal('100'))
    item.refresh_from_db()
    return item


@pytest.fixture
def soda(db):
    """Soda at 80.00 with no tracked ingredients"""
    return MenuItem.objects.create(name='Soda', price=Decimal('80.00'), category='Drinks')


@pytest.fixture
def unavailable_item(db):
    """A menu item that is switched off"""
    return MenuItem.objects.create(
        name='Seasonal Soup', price=Decimal('120.00'), category='Starters', is_available=False
    )


# ============================================================================
# ORDER HELPERS
# ============================================================================

@pytest.fixture
def served_table_orders(waiter_user, table_5, pizza, soda):
    """
    Table 5 with two served orders: 2 x pizza and 1 x soda (380.00 total).
    """
    from orders.models import Order
    from orders.services import OrderService

    first = OrderService.create_order(
        waiter_user, Order.OrderType.DINE_IN, [{'menu_item': pizza.id, 'quantity': 2}], table_number=5
    )
    second = OrderService.create_order(
        waiter_user, Order.OrderType.DINE_IN, [{'menu_item': soda.id, 'quantity': 1}], table_number=5
    )
    for order in (first, second):
        for status in (Order.OrderStatus.APPROVED, Order.OrderStatus.PREPARED, Order.OrderStatus.SERVED):
            OrderService.transition_status(order, status, actor=waiter_user)
    first.refresh_from_db()
    second.refresh_from_db()
    return [first, second]


@pytest.fixture
def pickup_bill(waiter_user, soda):
    """An unpaid bill for a single pickup soda (80.00)"""
    from orders.models import Order
    from orders.services import OrderService
    from billing.services import BillingService

    order = OrderService.create_order(
        waiter_user, Order.OrderType.PICKUP, [{'menu_item': soda.id, 'quantity': 1}]
    )
    return BillingService.create_pickup_bill(order)
