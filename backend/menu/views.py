from rest_framework.permissions import IsAuthenticated

from restaurant_backend.base import ReadOnlyBaseViewSet

from .models import MenuItem
from .serializers import CustomerMenuItemSerializer, MenuItemSerializer


class MenuItemViewSet(ReadOnlyBaseViewSet):
    """
    Read-only menu used by the ordering screens. Customers see available
    items only, without recipes or costs.
    """

    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["category", "is_available"]
    search_fields = ["name"]
    ordering_fields = ["name", "price", "category"]
    ordering = ["category", "name"]

    def get_serializer_class(self):
        if getattr(self.request.user, "is_staff_member", False):
            return MenuItemSerializer
        return CustomerMenuItemSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if not getattr(self.request.user, "is_staff_member", False):
            queryset = queryset.filter(is_available=True)
        return queryset
