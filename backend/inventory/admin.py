from django.contrib import admin

from .models import PurchaseOrder, PurchaseOrderItem, StockItem, StockUsageLog


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = ("name", "unit", "quantity_in_stock", "low_stock_threshold", "average_cost_per_unit")
    search_fields = ("name",)
    list_filter = ("unit",)


@admin.register(StockUsageLog)
class StockUsageLogAdmin(admin.ModelAdmin):
    list_display = ("stock_item", "quantity_used", "category", "recorded_by", "timestamp")
    list_filter = ("category",)


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "supplier_reference", "status", "total_cost", "ordered_at", "received_at")
    list_filter = ("status",)
    inlines = [PurchaseOrderItemInline]
