import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("billing", "0001_initial"),
        ("menu", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_type", models.CharField(choices=[("dine-in", "Dine In"), ("pickup", "Pickup")], max_length=10)),
                ("table_number", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("prepared", "Prepared"), ("served", "Served"), ("cancelled", "Cancelled"), ("billed", "Billed")], default="pending", max_length=10)),
                ("cancellation_reason", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("bill", models.ForeignKey(blank=True, help_text="Bill this order was rolled into.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to="billing.bill")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="created_orders", to=settings.AUTH_USER_MODEL)),
                ("waiter", models.ForeignKey(blank=True, help_text="Owning waiter; empty for orders a manager created directly.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders_as_waiter", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["table_number", "status"], name="orders_table_status_idx"),
                    models.Index(fields=["waiter", "status"], name="orders_waiter_status_idx"),
                    models.Index(fields=["status", "created_at"], name="orders_status_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("menu_item_name", models.CharField(max_length=200)),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("price_at_sale", models.DecimalField(decimal_places=2, help_text="Unit price captured when the line was added; never changes afterwards.", max_digits=10)),
                ("menu_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_items", to="menu.menuitem")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
