from django.db import migrations, models


def snapshot_order_ids(apps, schema_editor):
    Bill = apps.get_model("billing", "Bill")
    for bill in Bill.objects.all():
        bill.order_ids = [
            str(order_id)
            for order_id in bill.orders.order_by("created_at").values_list("id", flat=True)
        ]
        bill.save(update_fields=["order_ids"])


class Migration(migrations.Migration):

    dependencies = [
        ("billing", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="bill",
            name="order_ids",
            field=models.JSONField(blank=True, default=list),
        ),
        migrations.AddField(
            model_name="bill",
            name="gateway_order_id",
            field=models.CharField(blank=True, max_length=100),
        ),
        migrations.AddField(
            model_name="bill",
            name="gateway_payment_id",
            field=models.CharField(blank=True, max_length=100),
        ),
        migrations.AlterField(
            model_name="bill",
            name="payment_reference",
            field=models.CharField(
                blank=True,
                help_text="Free-text settlement reference (gateway payment id, card slip number).",
                max_length=100,
            ),
        ),
        migrations.AddConstraint(
            model_name="bill",
            constraint=models.UniqueConstraint(
                condition=models.Q(("gateway_order_id", ""), _negated=True),
                fields=("gateway_order_id",),
                name="billing_unique_gateway_order",
            ),
        ),
        migrations.AddConstraint(
            model_name="bill",
            constraint=models.UniqueConstraint(
                condition=models.Q(("gateway_payment_id", ""), _negated=True),
                fields=("gateway_payment_id",),
                name="billing_unique_gateway_payment",
            ),
        ),
        migrations.RunPython(snapshot_order_ids, migrations.RunPython.noop),
    ]
