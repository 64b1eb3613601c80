from django.contrib import admin

from .models import Bill


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("id", "table_number", "waiter", "total", "status", "stock_depleted", "created_at", "paid_at")
    list_filter = ("status", "stock_depleted")
    search_fields = ("id", "payment_reference", "gateway_order_id", "gateway_payment_id")
    readonly_fields = ("subtotal", "tax", "total", "order_ids", "gateway_order_id", "gateway_payment_id", "created_at", "paid_at")
