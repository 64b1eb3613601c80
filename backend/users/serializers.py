from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from restaurant_backend.base import BaseModelSerializer

from .models import User


class StaffSummarySerializer(BaseModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name", "role"]
        read_only_fields = fields


class CustomerRegistrationSerializer(serializers.ModelSerializer):
    """Self-service signup; always creates a customer account."""

    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    class Meta:
        model = User
        fields = ["id", "email", "name", "password"]

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data.get("name", ""),
            role=User.Role.CUSTOMER,
        )
