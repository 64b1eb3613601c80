from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="user",
            name="role",
            field=models.CharField(
                choices=[("WAITER", "Waiter"), ("MANAGER", "Manager"), ("ADMIN", "Admin"), ("CUSTOMER", "Customer")],
                default="WAITER",
                max_length=20,
                verbose_name="role",
            ),
        ),
    ]
