from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.models import OrderItem
from orders.services import OrderService, OrderItemService


class KitchenActionsMixin:
    """
    Mixin for kitchen routing and bulk item progress.

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="send")
    def send(self, request: Request, pk=None, **kwargs) -> Response:
        """Sends every NEW item to the kitchen."""
        order = OrderService.send_to_kitchen(request.tenant, pk)
        return Response(self._order_payload(order.id))

    @action(detail=True, methods=["post"], url_path="mark-all-ready")
    def mark_all_ready(self, request: Request, pk=None, **kwargs) -> Response:
        return self._advance_items(request, pk, OrderItem.ItemStatus.READY)

    @action(detail=True, methods=["post"], url_path="mark-all-served")
    def mark_all_served(self, request: Request, pk=None, **kwargs) -> Response:
        return self._advance_items(request, pk, OrderItem.ItemStatus.SERVED)

    def _advance_items(self, request: Request, pk, target_status) -> Response:
        moved = OrderItemService.advance_all(request.tenant, pk, target_status)
        data = self._order_payload(pk)
        data["items_updated"] = moved
        return Response(data)
