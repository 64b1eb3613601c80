from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StockItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, unique=True)),
                ("unit", models.CharField(choices=[("kg", "Kilogram"), ("g", "Gram"), ("l", "Litre"), ("ml", "Millilitre"), ("piece", "Piece")], max_length=10)),
                ("quantity_in_stock", models.DecimalField(decimal_places=3, default=Decimal("0"), help_text="Current on-hand quantity in this item's unit.", max_digits=12)),
                ("low_stock_threshold", models.DecimalField(decimal_places=3, default=Decimal("0"), help_text="At or below this quantity the item is reported as low on stock.", max_digits=12)),
                ("average_cost_per_unit", models.DecimalField(decimal_places=4, default=Decimal("0"), help_text="Weighted-average cost, recomputed on every purchase receipt.", max_digits=12)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Stock Item",
                "verbose_name_plural": "Stock Items",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("supplier_reference", models.CharField(blank=True, help_text="Free-text supplier name or reference.", max_length=200)),
                ("status", models.CharField(choices=[("ordered", "Ordered"), ("received", "Received"), ("cancelled", "Cancelled")], default="ordered", max_length=20)),
                ("total_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("ordered_at", models.DateTimeField(auto_now_add=True)),
                ("received_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-ordered_at"],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12)),
                ("cost_per_unit", models.DecimalField(decimal_places=4, max_digits=12)),
                ("purchase_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="inventory.purchaseorder")),
                ("stock_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="purchase_lines", to="inventory.stockitem")),
            ],
        ),
        migrations.CreateModel(
            name="StockUsageLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity_used", models.DecimalField(decimal_places=3, max_digits=12)),
                ("category", models.CharField(choices=[("kitchen_prep", "Kitchen Prep"), ("spillage", "Spillage"), ("staff_meal", "Staff Meal"), ("other", "Other")], max_length=20)),
                ("notes", models.TextField(blank=True)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="stock_usage_logs", to=settings.AUTH_USER_MODEL)),
                ("stock_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="usage_logs", to="inventory.stockitem")),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["stock_item", "timestamp"], name="inv_usage_item_ts_idx"),
                    models.Index(fields=["category"], name="inv_usage_category_idx"),
                ],
            },
        ),
    ]
