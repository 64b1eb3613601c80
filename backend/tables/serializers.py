from django.contrib.auth import get_user_model
from rest_framework import serializers

from restaurant_backend.base import BaseModelSerializer
from users.serializers import StaffSummarySerializer

from .models import Table


class TableSerializer(BaseModelSerializer):
    waiter_detail = StaffSummarySerializer(source="waiter", read_only=True)

    class Meta:
        model = Table
        fields = ["id", "table_number", "status", "waiter", "waiter_detail", "updated_at"]
        read_only_fields = ["status", "waiter", "updated_at"]
        select_related_fields = ["waiter"]


class TableStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Table.Status.choices)
    waiter = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.all(),
        required=False,
        allow_null=True,
    )
