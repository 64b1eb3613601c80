"""
Menu Catalog Tests

Tests for orderable-item lookup and cost-of-goods maintenance.
"""
import pytest
from decimal import Decimal

from inventory.services import StockLedgerService
from menu.models import MenuItemIngredient
from menu.services import MenuCatalogService
from restaurant_backend.exceptions import NotFound, Unavailable


@pytest.mark.django_db
class TestMenuLookup:

    def test_orderable_item_returns_available_item(self, soda):
        assert MenuCatalogService.get_orderable_item(soda.id) == soda

    def test_unavailable_item_is_rejected(self, unavailable_item):
        with pytest.raises(Unavailable) as exc_info:
            MenuCatalogService.get_orderable_item(unavailable_item.id)

        assert str(exc_info.value) == 'Seasonal Soup is currently unavailable'

    def test_missing_item_is_not_found(self):
        with pytest.raises(NotFound):
            MenuCatalogService.get_menu_item(424242)


@pytest.mark.django_db
class TestCostOfGoods:
    """
    Business Impact: Menu margins are reported from cost of goods, so it must
    follow the bill of materials.
    """

    def test_cost_of_goods_computed_from_ingredients(self, pizza):
        # 2 kg flour at 40.00 + 100 g cheese at 0.50
        assert pizza.cost_of_goods == Decimal('130.00')

    def test_cost_of_goods_follows_ingredient_changes(self, pizza, flour):
        ingredient = pizza.ingredients.get(stock_item=flour)
        ingredient.quantity = Decimal('1')
        ingredient.save()

        pizza.refresh_from_db()
        assert pizza.cost_of_goods == Decimal('90.00')

        ingredient.delete()
        pizza.refresh_from_db()
        assert pizza.cost_of_goods == Decimal('50.00')

    def test_deleted_stock_item_contributes_nothing(self, pizza, cheese):
        cheese.delete()

        pizza.refresh_from_db()
        assert pizza.cost_of_goods == Decimal('80.00')
        assert MenuItemIngredient.objects.filter(menu_item=pizza, stock_item__isnull=True).count() == 1

    def test_recompute_uses_current_average_cost(self, pizza, flour):
        StockLedgerService.apply_receipt(flour.id, Decimal('10'), Decimal('50'))

        cost = MenuCatalogService.recompute_cost_of_goods(pizza.id)

        # flour average is now 45.00
        assert cost == Decimal('140.00')


@pytest.mark.django_db
class TestMenuAPI:

    def test_staff_see_recipes_and_costs(self, waiter_client, pizza, unavailable_item):
        response = waiter_client.get('/api/menu/items/')

        assert response.status_code == 200
        assert response.data['count'] == 2
        pizza_row = next(row for row in response.data['results'] if row['id'] == pizza.id)
        assert Decimal(pizza_row['cost_of_goods']) == Decimal('130.00')
        assert len(pizza_row['ingredients']) == 2

    def test_customers_see_available_items_only(self, client_for, customer_user, pizza, unavailable_item):
        response = client_for(customer_user).get('/api/menu/items/')

        assert response.status_code == 200
        assert [row['name'] for row in response.data['results']] == ['Margherita Pizza']
        assert 'cost_of_goods' not in response.data['results'][0]
