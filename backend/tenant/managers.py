from django.db import models
from threading import local

# Thread-local storage for current tenant
_thread_locals = local()


def set_current_tenant(tenant):
    """
    Set the current tenant for this thread.

    Args:
        tenant: Tenant instance or None to clear

    This is called by TenantMiddleware to establish tenant context for the
    current request.
    """
    _thread_locals.tenant = tenant


def get_current_tenant():
    """
    Get the current tenant for this thread.

    Returns:
        Tenant instance or None if no tenant context is set
    """
    return getattr(_thread_locals, 'tenant', None)


class TenantManager(models.Manager):
    """
    Automatically filters querysets by current tenant.

    FAILS CLOSED: Returns empty queryset if no tenant context is set.
    This prevents accidental data leakage across tenants.

    Usage:
        class Order(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE)

            objects = TenantManager()  # Tenant-filtered
            all_objects = models.Manager()  # Bypass filter for services and admin

            class Meta:
                default_manager_name = 'all_objects'

    Services pass the tenant explicitly and query through all_objects, so
    related managers (order.items) and row locks do not depend on the
    calling thread's context.
    """

    def get_queryset(self):
        tenant = get_current_tenant()

        if tenant:
            return super().get_queryset().filter(tenant=tenant)

        # FAIL CLOSED
        return super().get_queryset().none()
