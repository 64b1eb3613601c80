from django.contrib import admin

from .models import OnlineOrder, OnlineOrderItem, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item", "menu_item_name", "quantity", "price_at_sale")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "order_type", "table_number", "status", "waiter", "bill", "created_at")
    list_filter = ("status", "order_type")
    search_fields = ("id", "table_number")
    readonly_fields = ("created_at", "updated_at")
    inlines = [OrderItemInline]


class OnlineOrderItemInline(admin.TabularInline):
    model = OnlineOrderItem
    extra = 0
    readonly_fields = ("menu_item", "menu_item_name", "quantity", "price_at_sale")


@admin.register(OnlineOrder)
class OnlineOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "customer", "status", "total", "payment_id", "created_at")
    list_filter = ("status",)
    search_fields = ("id", "gateway_order_id", "payment_id")
    readonly_fields = ("created_at", "updated_at", "confirmed_at")
    inlines = [OnlineOrderItemInline]
