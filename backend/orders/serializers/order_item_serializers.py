from decimal import Decimal
from rest_framework import serializers

from orders.models import OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    line_total_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_ref",
            "product_name",
            "unit_price_cents",
            "quantity",
            "discount_percent",
            "line_total_cents",
            "status",
            "notes",
            "created_at",
            "status_changed_at",
        ]
        read_only_fields = fields


class AddItemSerializer(serializers.Serializer):
    """
    A line as the catalog priced it right now. The name and price are
    copied onto the order and never re-read.
    """

    product_ref = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    product_name = serializers.CharField(max_length=200)
    unit_price_cents = serializers.IntegerField(min_value=0)
    quantity = serializers.IntegerField(min_value=1, max_value=99, default=1)
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
        default=Decimal("0"),
    )
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class UpdateOrderItemSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderItem.ItemStatus.choices, required=False)
    quantity = serializers.IntegerField(min_value=1, max_value=99, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one of status, quantity, notes or discount_percent.")
        return attrs
