from django.contrib import admin

from .models import MenuItem, MenuItemIngredient


class MenuItemIngredientInline(admin.TabularInline):
    model = MenuItemIngredient
    extra = 1


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "cost_of_goods", "is_available")
    list_filter = ("category", "is_available")
    search_fields = ("name",)
    readonly_fields = ("cost_of_goods",)
    inlines = [MenuItemIngredientInline]
