from core_backend.base import ReadOnlyBaseViewSet
from core_backend.base.mixins import TenantScopedQuerysetMixin
from orders.models import DiningTable
from orders.serializers import DiningTableSerializer
from users.permissions import IsTenantStaff


class DiningTableViewSet(TenantScopedQuerysetMixin, ReadOnlyBaseViewSet):
    """Active tables an order can be opened against."""

    queryset = DiningTable.objects.all()
    serializer_class = DiningTableSerializer
    permission_classes = [IsTenantStaff]
    ordering = ["name"]

    def get_queryset(self):
        return super().get_queryset().filter(is_active=True)
