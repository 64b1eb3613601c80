import uuid
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
            name="Bill",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("table_number", models.PositiveIntegerField(blank=True, db_index=True, null=True)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("tax", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("status", models.CharField(choices=[("unpaid", "Unpaid"), ("paid", "Paid")], default="unpaid", max_length=10)),
                ("payment_reference", models.CharField(blank=True, help_text="Gateway payment id; blank for cash settlements.", max_length=100)),
                ("stock_depleted", models.BooleanField(default=False, help_text="False on a paid bill means settlement side effects still need reconciling.")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("waiter", models.ForeignKey(blank=True, help_text="Waiter credited with the bill (owner of its first order).", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="bills", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="billing_status_created_idx"),
                    models.Index(fields=["status", "stock_depleted"], name="billing_status_depleted_idx"),
                ],
            },
        ),
    ]
