from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("category", models.CharField(blank=True, db_index=True, max_length=100)),
                ("is_available", models.BooleanField(default=True, help_text="Unavailable items cannot be added to new orders.")),
                ("cost_of_goods", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Sum of ingredient quantity times stock average cost.", max_digits=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["category", "name"],
                "indexes": [models.Index(fields=["category", "is_available"], name="menu_category_avail_idx")],
            },
        ),
        migrations.CreateModel(
            name="MenuItemIngredient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=3, help_text="Quantity of the stock item used per serving, in the stock item's unit.", max_digits=12)),
                ("menu_item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ingredients", to="menu.menuitem")),
                ("stock_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="menu_ingredients", to="inventory.stockitem")),
            ],
            options={
                "verbose_name": "Menu Item Ingredient",
                "verbose_name_plural": "Menu Item Ingredients",
            },
        ),
    ]
