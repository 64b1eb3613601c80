"""
Orders services package.

- OrderService: order lifecycle (create, edit items, transition, cancel, delete)
- TransitionResult: outcome of a status change, including any bill produced
- OnlineOrderService: customer orders paid through the gateway and delivered
"""

from .order_service import OrderService, TransitionResult
from .online_order_service import OnlineOrderService

__all__ = [
    "OrderService",
    "TransitionResult",
    "OnlineOrderService",
]
