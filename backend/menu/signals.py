from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from inventory.models import StockItem

from .models import MenuItemIngredient
from .services import MenuCatalogService


@receiver(post_save, sender=MenuItemIngredient)
@receiver(post_delete, sender=MenuItemIngredient)
def ingredient_changed(sender, instance, **kwargs):
    """Keep MenuItem.cost_of_goods in step with its bill of materials."""
    MenuCatalogService.recompute_cost_of_goods(instance.menu_item_id)


@receiver(post_delete, sender=StockItem)
def stock_item_deleted(sender, instance, **kwargs):
    """
    Ingredients of a deleted stock item are nulled by SET_NULL without
    firing post_save, so recompute the menu items that now reference nothing.
    """
    menu_item_ids = (
        MenuItemIngredient.objects.filter(stock_item__isnull=True)
        .values_list("menu_item_id", flat=True)
        .distinct()
    )
    for menu_item_id in menu_item_ids:
        MenuCatalogService.recompute_cost_of_goods(menu_item_id)
