"""
Orders views package - modular view layer with mixins.
"""

from .order_viewset import OrderViewSet
from .item_viewset import OrderItemViewSet
from .table_viewset import DiningTableViewSet

__all__ = [
    'OrderViewSet',
    'OrderItemViewSet',
    'DiningTableViewSet',
]
