import logging

from rest_framework import generics
from rest_framework.permissions import AllowAny

from .serializers import CustomerRegistrationSerializer

logger = logging.getLogger(__name__)


class CustomerRegistrationView(generics.CreateAPIView):
    serializer_class = CustomerRegistrationSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"Customer account {user.pk} registered")
