from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer for all model serializers.

    Subclasses may declare ``select_related_fields`` and
    ``prefetch_related_fields`` on their Meta; viewsets built on
    ``BaseViewSet`` apply them to the queryset automatically.
    """

    class Meta:
        select_related_fields = []
        prefetch_related_fields = []
