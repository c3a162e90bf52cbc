"""
Core backend base components.

This package provides foundational classes used by every tenant-scoped API
in the project so that pagination, filtering and tenant isolation behave the
same everywhere.
"""

from .viewsets import BaseViewSet, ReadOnlyBaseViewSet
from .mixins import OptimizedQuerysetMixin, TenantScopedQuerysetMixin
from .filters import BaseFilterSet, normalize_datetime_value

__all__ = [
    # ViewSets
    'BaseViewSet',
    'ReadOnlyBaseViewSet',

    # Mixins
    'OptimizedQuerysetMixin',
    'TenantScopedQuerysetMixin',

    # Filters
    'BaseFilterSet',
    'normalize_datetime_value',
]
