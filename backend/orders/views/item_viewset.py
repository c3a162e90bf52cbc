from rest_framework import status
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.base.mixins import TenantScopedQuerysetMixin
from orders.models import OrderItem
from orders.serializers import (
    OrderSerializer,
    OrderItemSerializer,
    AddItemSerializer,
    UpdateOrderItemSerializer,
)
from orders.services import OrderService, OrderItemService
from users.permissions import IsTenantStaff


class OrderItemViewSet(TenantScopedQuerysetMixin, BaseViewSet):
    """
    A ViewSet for managing the lines of a specific order.

    Writes return the entire updated order so the register can redraw totals
    and status from one response.
    """

    queryset = OrderItem.objects.all()
    serializer_class = OrderItemSerializer
    permission_classes = [IsTenantStaff]
    http_method_names = ["get", "post", "patch", "head", "options"]
    filterset_fields = {"status": ["exact", "in"]}
    ordering = ["id"]

    def get_serializer_class(self):
        if self.action == "create":
            return AddItemSerializer
        if self.action == "partial_update":
            return UpdateOrderItemSerializer
        return OrderItemSerializer

    def get_queryset(self):
        """
        Filter items based on the order_pk provided in the URL.
        Tenant context handled by super().
        """
        order = OrderService.get_order(self.request.tenant, self.kwargs["order_pk"])
        return super().get_queryset().filter(order=order)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        OrderItemService.add_item(request.tenant, self.kwargs["order_pk"], **serializer.validated_data)
        return Response(self._order_payload(), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        OrderItemService.update_item(
            request.tenant,
            self.kwargs["order_pk"],
            self.kwargs["pk"],
            **serializer.validated_data,
        )
        return Response(self._order_payload())

    def _order_payload(self):
        order = OrderService.get_order(self.request.tenant, self.kwargs["order_pk"])
        return OrderSerializer(order, context=self.get_serializer_context()).data
