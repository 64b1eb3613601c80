import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("menu", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OnlineOrder",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("status", models.CharField(choices=[("payment_pending", "Payment Pending"), ("confirmed", "Confirmed"), ("preparing", "Preparing"), ("out_for_delivery", "Out For Delivery"), ("delivered", "Delivered"), ("cancelled", "Cancelled")], default="payment_pending", max_length=20)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("gateway_order_id", models.CharField(blank=True, max_length=100)),
                ("payment_id", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("customer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="online_orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer", "created_at"], name="online_customer_created_idx"),
                    models.Index(fields=["status", "created_at"], name="online_status_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("gateway_order_id", ""), _negated=True), fields=("gateway_order_id",), name="online_unique_gateway_order"),
                    models.UniqueConstraint(condition=models.Q(("payment_id", ""), _negated=True), fields=("payment_id",), name="online_unique_payment"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OnlineOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("menu_item_name", models.CharField(max_length=200)),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("price_at_sale", models.DecimalField(decimal_places=2, max_digits=10)),
                ("menu_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="online_order_items", to="menu.menuitem")),
                ("online_order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.onlineorder")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
