import django_filters
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date
from datetime import datetime, time


def normalize_datetime_value(value, *, is_end=False):
    """
    Normalize a date or datetime string to a timezone-aware datetime.

    Args:
        value: A string (date or datetime), date object, or datetime object
        is_end: If True and value is date-only, returns end of day (23:59:59.999999)
                If False, returns start of day (00:00:00)

    Examples:
        normalize_datetime_value("2025-11-11", is_end=False)  # 2025-11-11 00:00:00
        normalize_datetime_value("2025-11-11", is_end=True)   # 2025-11-11 23:59:59.999999
        normalize_datetime_value("2025-11-11T10:30:00Z")      # unchanged
    """
    if not value:
        return value

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value)
        return value

    if isinstance(value, str):
        dt = parse_datetime(value)
        if dt:
            return timezone.make_aware(dt) if timezone.is_naive(dt) else dt
        value = parse_date(value)
        if value is None:
            return None

    # date object
    boundary = time.max if is_end else time.min
    return timezone.make_aware(datetime.combine(value, boundary))


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """
    DateTimeFilter that treats a date-only upper bound as the end of that day.

    "?opened_at__lte=2025-11-11" therefore includes sessions opened at 18:00
    on the 11th; a full datetime is used exactly as given.
    """

    def filter(self, qs, value):
        if isinstance(value, datetime) and value.time() == time(0, 0, 0):
            if self.lookup_expr in ['lte', 'lt']:
                value = normalize_datetime_value(value.date(), is_end=True)
        return super().filter(qs, value)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set: every generated DateTimeField filter is a
    FlexibleDateTimeFilter.
    """

    @classmethod
    def filter_for_field(cls, field, field_name, lookup_expr='exact'):
        if isinstance(field, models.DateTimeField) and lookup_expr != 'isnull':
            return FlexibleDateTimeFilter(field_name=field_name, lookup_expr=lookup_expr)
        return super().filter_for_field(field, field_name, lookup_expr)
