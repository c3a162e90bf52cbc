from core_backend.base import ReadOnlyBaseViewSet
from core_backend.base.mixins import TenantScopedQuerysetMixin
from users.permissions import IsTenantStaff
from .models import Payment
from .serializers import PaymentSerializer


class PaymentViewSet(TenantScopedQuerysetMixin, ReadOnlyBaseViewSet):
    """
    Read-only ledger of the tenant's payments.

    Payments are only ever created through the order settlement endpoints.
    """

    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    permission_classes = [IsTenantStaff]
    filterset_fields = {
        "order": ["exact"],
        "provider": ["exact"],
        "status": ["exact"],
        "created_at": ["gte", "lte"],
    }
    ordering_fields = ["created_at", "amount_cents"]
    ordering = ["-created_at"]
