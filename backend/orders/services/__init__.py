"""
Orders services package.

- OrderService: order lifecycle (create, send to kitchen, request bill, cancel)
- OrderItemService: line items and the kitchen item state machine
- BillSplitService: advisory bill split previews
"""

# Core order operations
from .order_service import OrderService, derive_status_from_items

# Item management
from .item_service import OrderItemService

# Split previews
from .split_service import BillSplitService, SplitShare

__all__ = [
    'OrderService',
    'derive_status_from_items',
    'OrderItemService',
    'BillSplitService',
    'SplitShare',
]
