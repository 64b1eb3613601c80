from rest_framework import serializers

from restaurant_backend.base import BaseModelSerializer

from .models import MenuItem, MenuItemIngredient


class MenuItemIngredientSerializer(BaseModelSerializer):
    stock_item_name = serializers.CharField(source="stock_item.name", read_only=True, default=None)
    unit = serializers.CharField(source="stock_item.unit", read_only=True, default=None)

    class Meta:
        model = MenuItemIngredient
        fields = ["id", "stock_item", "stock_item_name", "unit", "quantity"]


class MenuItemSerializer(BaseModelSerializer):
    ingredients = MenuItemIngredientSerializer(many=True, read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "is_available",
            "cost_of_goods",
            "ingredients",
        ]
        prefetch_related_fields = ["ingredients__stock_item"]


class CustomerMenuItemSerializer(BaseModelSerializer):
    class Meta:
        model = MenuItem
        fields = ["id", "name", "description", "price", "category"]
        read_only_fields = fields
