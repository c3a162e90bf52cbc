from rest_framework import serializers

from .models import Payment
from orders.services import BillSplitService


class PaymentSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    tip_cents = serializers.IntegerField(read_only=True)
    change_due_cents = serializers.IntegerField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order",
            "order_number",
            "provider",
            "status",
            "amount_cents",
            "tip_cents",
            "change_due_cents",
            "currency",
            "metadata",
            "processed_by",
            "created_at",
        ]
        read_only_fields = fields
        select_related_fields = ["order"]


class PayRequestSerializer(serializers.Serializer):
    """
    {"action": "pay", "provider": "CASH", "amount_cents": 1000,
     "tip_cents": 100, "split_index": 2}

    Currency is never accepted from the caller; it comes from the order.
    """

    action = serializers.ChoiceField(choices=["pay"], required=False)
    provider = serializers.ChoiceField(choices=Payment.Provider.choices)
    amount_cents = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    tip_cents = serializers.IntegerField(min_value=0, required=False, default=0)
    split_index = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class SplitPreviewSerializer(serializers.Serializer):
    """
    One of:
        {"type": "equally", "number_of_splits": 3}
        {"type": "by_amount", "amounts": [500, 700]}
        {"type": "by_items", "items": [[12, 13], [14]]}
    with optional "labels": ["Ana", "Ben"].
    """

    type = serializers.ChoiceField(choices=BillSplitService.SPLIT_TYPES)
    number_of_splits = serializers.IntegerField(required=False)
    amounts = serializers.ListField(
        child=serializers.IntegerField(), required=False, allow_empty=True
    )
    items = serializers.ListField(
        child=serializers.ListField(child=serializers.IntegerField(), allow_empty=True),
        required=False,
        allow_empty=True,
    )
    labels = serializers.ListField(
        child=serializers.CharField(max_length=50, allow_blank=True), required=False
    )

    def validate(self, attrs):
        required = {
            "equally": "number_of_splits",
            "by_amount": "amounts",
            "by_items": "items",
        }[attrs["type"]]
        if attrs.get(required) is None:
            raise serializers.ValidationError({required: ["This field is required for this split type."]})
        return attrs
