"""
Restaurant backend base components.

Foundational viewset and serializer classes used by every app so list
endpoints share pagination, filtering and queryset optimization.
"""

from .viewsets import BaseViewSet, ReadOnlyBaseViewSet
from .serializers import BaseModelSerializer
from .mixins import OptimizedQuerysetMixin

__all__ = [
    "BaseViewSet",
    "ReadOnlyBaseViewSet",
    "BaseModelSerializer",
    "OptimizedQuerysetMixin",
]
