"""
Admin utilities for the core_backend app.
"""

from .mixins import TenantAdminMixin, ReadOnlyAdminMixin

__all__ = [
    'TenantAdminMixin',
    'ReadOnlyAdminMixin',
]
