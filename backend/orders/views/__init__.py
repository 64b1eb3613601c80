from .order_viewset import OrderViewSet
from .online_order_viewset import OnlineOrderViewSet

__all__ = ["OrderViewSet", "OnlineOrderViewSet"]
