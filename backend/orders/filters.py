import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Filters for the order list. ``waiter`` accepts a user id or the literal
    ``manager`` for orders created directly by a manager.
    """

    waiter = django_filters.CharFilter(method="filter_waiter")
    created_at__gte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_at__lte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "table_number", "order_type"]

    def filter_waiter(self, queryset, name, value):
        if value == Order.MANAGER_OWNER:
            return queryset.filter(waiter__isnull=True)
        try:
            return queryset.filter(waiter_id=int(value))
        except (TypeError, ValueError):
            return queryset.none()
