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
            name="Table",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("table_number", models.PositiveIntegerField(unique=True)),
                ("status", models.CharField(choices=[("available", "Available"), ("occupied", "Occupied")], default="available", max_length=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("waiter", models.ForeignKey(blank=True, help_text="Waiter serving the table while it is occupied.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="served_tables", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["table_number"],
            },
        ),
    ]
