from rest_framework import serializers

from orders.models import DiningTable, Order
from tenant.serializers import TenantSerializerMixin
from .order_item_serializers import OrderItemSerializer


class DiningTableSerializer(serializers.ModelSerializer):
    class Meta:
        model = DiningTable
        fields = ["id", "name", "seats"]


class OrderSerializer(serializers.ModelSerializer):
    """Read representation of an order with its lines and totals."""

    items = OrderItemSerializer(many=True, read_only=True)
    table = DiningTableSerializer(read_only=True)
    amount_due_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "currency",
            "tax_rate",
            "table",
            "cashier",
            "subtotal_cents",
            "discount_cents",
            "tax_cents",
            "total_cents",
            "tip_cents",
            "amount_due_cents",
            "notes",
            "items",
            "opened_at",
            "sent_to_kitchen_at",
            "closed_at",
            "updated_at",
        ]
        read_only_fields = fields
        select_related_fields = ["table", "cashier"]
        prefetch_related_fields = ["items"]


class OrderListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "currency",
            "table",
            "total_cents",
            "tip_cents",
            "opened_at",
            "closed_at",
        ]
        read_only_fields = fields


class OrderCreateSerializer(TenantSerializerMixin, serializers.Serializer):
    table = serializers.PrimaryKeyRelatedField(
        queryset=DiningTable.all_objects.filter(is_active=True),
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
