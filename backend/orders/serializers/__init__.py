"""
Orders serializers package - modular serializer layer.
"""

# Order item serializers
from .order_item_serializers import (
    OrderItemSerializer,
    AddItemSerializer,
    UpdateOrderItemSerializer,
)

# Order serializers
from .order_serializers import (
    DiningTableSerializer,
    OrderSerializer,
    OrderListSerializer,
    OrderCreateSerializer,
)

__all__ = [
    # Order items
    'OrderItemSerializer',
    'AddItemSerializer',
    'UpdateOrderItemSerializer',
    # Orders
    'DiningTableSerializer',
    'OrderSerializer',
    'OrderListSerializer',
    'OrderCreateSerializer',
]
