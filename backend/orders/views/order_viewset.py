from rest_framework import status
from rest_framework.response import Response
import logging

from core_backend.base import BaseViewSet
from core_backend.base.mixins import TenantScopedQuerysetMixin
from orders.models import Order
from orders.serializers import (
    OrderSerializer,
    OrderListSerializer,
    OrderCreateSerializer,
)
from orders.services import OrderService
from users.permissions import IsTenantStaff

from .status_actions import StatusActionsMixin
from .kitchen_actions import KitchenActionsMixin
from .payment_actions import PaymentActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    StatusActionsMixin,
    KitchenActionsMixin,
    PaymentActionsMixin,
    TenantScopedQuerysetMixin,
    BaseViewSet,
):
    """
    Orders of the tenant named in the URL.

    This viewset combines multiple mixins to provide:
    - Status transitions (StatusActionsMixin)
    - Kitchen routing and bulk item progress (KitchenActionsMixin)
    - Settlement and bill splitting (PaymentActionsMixin)

    Orders are never edited or deleted directly; every change goes
    through a service so totals and status stay consistent.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    permission_classes = [IsTenantStaff]
    http_method_names = ["get", "post", "head", "options"]
    filterset_fields = {
        "status": ["exact", "in"],
        "table": ["exact"],
        "opened_at": ["gte", "lte"],
        "closed_at": ["gte", "lte"],
    }
    ordering_fields = ["opened_at", "closed_at", "order_number", "total_cents"]
    ordering = ["-opened_at"]

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        if self.action == "list":
            return OrderListSerializer
        return OrderSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.create_order(
            tenant=request.tenant,
            cashier=request.user,
            table=serializer.validated_data.get("table"),
            notes=serializer.validated_data.get("notes", ""),
        )
        return Response(self._order_payload(order.id), status=status.HTTP_201_CREATED)

    def _order_payload(self, order_id):
        """Serialize a fresh read of the order after a service call."""
        order = OrderService.get_order(self.request.tenant, order_id)
        return OrderSerializer(order, context=self.get_serializer_context()).data
