from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from restaurant_backend.base import BaseViewSet
from users.permissions import IsAdminOrHigher, IsManagerOrHigher, IsStaffMember

from .models import Table
from .serializers import TableSerializer, TableStatusSerializer
from .services import TableService


class TableViewSet(BaseViewSet):
    queryset = Table.objects.all()
    serializer_class = TableSerializer
    filterset_fields = ["status", "waiter"]
    ordering = ["table_number"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdminOrHigher()]
        if self.action in ("create", "partial_update"):
            return [IsManagerOrHigher()]
        return [IsStaffMember()]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = TableService.create_table(serializer.validated_data["table_number"])
        return Response(self.get_serializer(table).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="status", permission_classes=[IsStaffMember])
    def set_status(self, request, pk=None):
        table = self.get_object()
        serializer = TableStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        table = TableService.set_table_status(
            table,
            serializer.validated_data["status"],
            waiter=serializer.validated_data.get("waiter") or request.user,
        )
        return Response(self.get_serializer(table).data)
