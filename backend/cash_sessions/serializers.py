from rest_framework import serializers

from .models import CashSession


class CashSessionSerializer(serializers.ModelSerializer):
    opened_by_name = serializers.SerializerMethodField()
    closed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = CashSession
        fields = [
            "id",
            "status",
            "currency",
            "opening_cash_cents",
            "closing_cash_cents",
            "expected_cash_cents",
            "variance_cents",
            "opened_by",
            "opened_by_name",
            "closed_by",
            "closed_by_name",
            "opened_at",
            "closed_at",
            "notes",
            "closing_notes",
        ]
        read_only_fields = fields
        select_related_fields = ["opened_by", "closed_by"]

    def get_opened_by_name(self, obj):
        return obj.opened_by.get_full_name() if obj.opened_by else None

    def get_closed_by_name(self, obj):
        return obj.closed_by.get_full_name() if obj.closed_by else None


class OpenCashSessionSerializer(serializers.Serializer):
    opening_cash_cents = serializers.IntegerField(min_value=0)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class CloseCashSessionSerializer(serializers.Serializer):
    closing_cash_cents = serializers.IntegerField(min_value=0)
    closing_notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
