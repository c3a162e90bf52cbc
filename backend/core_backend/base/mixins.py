from rest_framework.viewsets import ViewSetMixin

from core_backend.exceptions import NotFoundError


class OptimizedQuerysetMixin(ViewSetMixin):
    """
    A ViewSet mixin that optimizes the queryset using the
    `select_related_fields` and `prefetch_related_fields` attributes declared
    in the Meta class of the serializer used for the current action.
    """

    def get_queryset(self):
        queryset = super().get_queryset()

        try:
            serializer_class = self.get_serializer_class()
        except (AttributeError, AssertionError):
            return queryset

        meta = getattr(serializer_class, "Meta", None)
        if meta is None:
            return queryset

        select_related = getattr(meta, "select_related_fields", [])
        prefetch_related = getattr(meta, "prefetch_related_fields", [])

        if select_related:
            queryset = queryset.select_related(*select_related)
        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset


class TenantScopedQuerysetMixin:
    """
    Filters the queryset by request.tenant (set by TenantMiddleware).

    Usage:
        class OrderViewSet(TenantScopedQuerysetMixin, BaseViewSet):
            # Queryset is automatically tenant-filtered

    FAILS CLOSED: a tenant-aware model requested without tenant context
    is reported as not found rather than returning every tenant's rows.
    """

    def get_queryset(self):
        qs = super().get_queryset()

        # Only filter if model has tenant field
        if not hasattr(qs.model, 'tenant'):
            return qs

        tenant = getattr(self.request, 'tenant', None)
        if tenant is None:
            raise NotFoundError("Tenant not found.")

        return qs.filter(tenant=tenant)
