"""
Project-wide filter backend.

Views declare ``filterset_fields`` as a dict; the generated filter set is
built on BaseFilterSet, so every DateTimeField lookup accepts a bare date:

    filterset_fields = {"opened_at": ["gte", "lte"], "status": ["exact"]}

    ?opened_at__gte=2025-11-11&opened_at__lte=2025-11-11   # the whole day
"""

from django_filters.rest_framework import DjangoFilterBackend

from core_backend.base.filters import BaseFilterSet


class ProjectFilterBackend(DjangoFilterBackend):
    filterset_base = BaseFilterSet
