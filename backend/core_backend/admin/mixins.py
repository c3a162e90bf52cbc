from django.contrib import admin


class TenantAdminMixin:
    """
    Admin mixin for tenant-scoped models.

    The admin runs outside any tenant context, so the fail-closed
    ``objects`` manager would return nothing; ``all_objects`` is used instead
    and the tenant is added to the list columns and filters.
    """

    def get_queryset(self, request):
        queryset = self.model.all_objects.all()
        ordering = self.get_ordering(request)
        if ordering:
            queryset = queryset.order_by(*ordering)
        return queryset.select_related('tenant')

    def get_list_display(self, request):
        list_display = list(super().get_list_display(request))
        if 'tenant' not in list_display:
            list_display.append('tenant')
        return list_display

    def get_list_filter(self, request):
        list_filter = list(super().get_list_filter(request))
        if 'tenant' not in list_filter:
            list_filter.insert(0, 'tenant')
        return list_filter


class ReadOnlyAdminMixin:
    """Money records are written by the settlement service only."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
