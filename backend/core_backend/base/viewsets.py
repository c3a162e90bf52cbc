from rest_framework import viewsets, filters
from ..filter_backends import ProjectFilterBackend

from .mixins import OptimizedQuerysetMixin
from ..pagination import StandardPagination


class BaseViewSet(OptimizedQuerysetMixin, viewsets.ModelViewSet):
    """
    Base ViewSet that provides standard configuration for all ModelViewSets.

    Features:
    - Automatic query optimization via OptimizedQuerysetMixin
    - Standard pagination, filtering and ordering

    Usage:
        class CashSessionViewSet(TenantScopedQuerysetMixin, BaseViewSet):
            serializer_class = CashSessionSerializer
    """

    pagination_class = StandardPagination

    filter_backends = [
        ProjectFilterBackend,
        filters.OrderingFilter,
    ]

    ordering = ['-id']

    def get_queryset(self):
        """
        Re-evaluate the class-level queryset at request time.

        The class attribute is built at import time, before any tenant context
        exists, so a fresh Model.objects queryset is passed through the mixin chain.
        """
        if getattr(self, 'queryset', None) is not None:
            model = self.queryset.model
            original_queryset = self.queryset
            self.queryset = model.objects.all()
            try:
                return super().get_queryset()
            finally:
                self.queryset = original_queryset
        return super().get_queryset()


class ReadOnlyBaseViewSet(OptimizedQuerysetMixin, viewsets.ReadOnlyModelViewSet):
    """
    Base ViewSet for read-only endpoints.
    """

    pagination_class = StandardPagination
    filter_backends = [
        ProjectFilterBackend,
        filters.OrderingFilter,
    ]
    ordering = ['-id']

    def get_queryset(self):
        """Re-evaluate queryset at request time for tenant context"""
        if getattr(self, 'queryset', None) is not None:
            model = self.queryset.model
            original_queryset = self.queryset
            self.queryset = model.objects.all()
            try:
                return super().get_queryset()
            finally:
                self.queryset = original_queryset
        return super().get_queryset()
