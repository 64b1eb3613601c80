"""
Orders serializers package - modular serializer layer.
"""

from .order_item_serializers import OrderItemSerializer, OrderItemInputSerializer
from .order_serializers import OrderSerializer, OrderCreateSerializer, OrderItemsUpdateSerializer
from .status_serializers import UpdateOrderStatusSerializer, CancelOrderSerializer
from .online_order_serializers import (
    OnlineOrderItemSerializer,
    OnlineOrderSerializer,
    OnlineOrderCreateSerializer,
)

__all__ = [
    "OrderItemSerializer",
    "OrderItemInputSerializer",
    "OrderSerializer",
    "OrderCreateSerializer",
    "OrderItemsUpdateSerializer",
    "UpdateOrderStatusSerializer",
    "CancelOrderSerializer",
    "OnlineOrderItemSerializer",
    "OnlineOrderSerializer",
    "OnlineOrderCreateSerializer",
]
