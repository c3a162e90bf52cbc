from rest_framework import serializers


class TenantSerializerMixin:
    """
    Mixin for serializers to ensure tenant consistency.

    Validates that every PrimaryKeyRelatedField points at a row owned by the
    request tenant. A foreign row is reported exactly like a missing one.

    Usage:
        class OrderCreateSerializer(TenantSerializerMixin, serializers.Serializer):
            table = serializers.PrimaryKeyRelatedField(
                queryset=DiningTable.all_objects.all(), required=False
            )
    """

    def validate(self, data):
        tenant = self.context['request'].tenant

        for field_name, field in self.fields.items():
            if isinstance(field, serializers.PrimaryKeyRelatedField):
                value = data.get(field_name)
                if value is not None and getattr(value, 'tenant_id', None) != tenant.id:
                    raise serializers.ValidationError({
                        field_name: "Object does not exist."
                    })

        return super().validate(data)
