from django.contrib import admin

from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("table_number", "status", "waiter", "updated_at")
    list_filter = ("status",)
