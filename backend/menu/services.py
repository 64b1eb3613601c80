import logging
from decimal import ROUND_HALF_UP, Decimal

from restaurant_backend.exceptions import NotFound, Unavailable

from .models import MenuItem

logger = logging.getLogger(__name__)


class MenuCatalogService:
    """Read access to the menu plus cost-of-goods maintenance."""

    @staticmethod
    def get_menu_item(menu_item_id) -> MenuItem:
        try:
            return MenuItem.objects.get(pk=menu_item_id)
        except (MenuItem.DoesNotExist, ValueError, TypeError):
            raise NotFound("Menu item", menu_item_id)

    @staticmethod
    def get_orderable_item(menu_item_id) -> MenuItem:
        """Resolve a menu item for a new order line, rejecting unavailable ones."""
        menu_item = MenuCatalogService.get_menu_item(menu_item_id)
        if not menu_item.is_available:
            raise Unavailable(menu_item)
        return menu_item

    @staticmethod
    def compute_cost_of_goods(menu_item: MenuItem) -> Decimal:
        """
        Sum ``quantity * average_cost_per_unit`` over the item's ingredients.
        Ingredients whose stock record is gone contribute nothing.
        """
        total = Decimal("0")
        for ingredient in menu_item.ingredients.select_related("stock_item"):
            if ingredient.stock_item is None:
                continue
            total += ingredient.quantity * ingredient.stock_item.average_cost_per_unit
        return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    @staticmethod
    def recompute_cost_of_goods(menu_item_id) -> Decimal:
        try:
            menu_item = MenuItem.objects.get(pk=menu_item_id)
        except MenuItem.DoesNotExist:
            # Ingredient rows are deleted alongside their menu item.
            return Decimal("0.00")

        cost = MenuCatalogService.compute_cost_of_goods(menu_item)
        MenuItem.objects.filter(pk=menu_item_id).update(cost_of_goods=cost)
        logger.debug(f"Cost of goods for menu item {menu_item_id} is now {cost}")
        return cost
