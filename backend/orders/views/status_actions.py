from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.services import OrderService


class StatusActionsMixin:
    """
    Mixin for order-level status transitions.

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request: Request, pk=None, **kwargs) -> Response:
        """Cancels an order that has not reached payment."""
        return self._handle_status_change(request, pk, OrderService.cancel_order)

    @action(detail=True, methods=["post"], url_path="request-bill")
    def request_bill(self, request: Request, pk=None, **kwargs) -> Response:
        """Moves a READY order to FOR_PAYMENT."""
        return self._handle_status_change(request, pk, OrderService.request_bill)

    def _handle_status_change(self, request: Request, pk, service_method) -> Response:
        """Generic handler for status-changing actions."""
        order = service_method(request.tenant, pk)
        return Response(self._order_payload(order.id))
