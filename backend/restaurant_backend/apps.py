from django.apps import AppConfig


class RestaurantBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "restaurant_backend"
    verbose_name = "Restaurant Backend"
