from rest_framework import permissions
import logging

logger = logging.getLogger(__name__)


class IsTenantStaff(permissions.BasePermission):
    """
    Allows access only to authenticated operators of the tenant named in the URL.

    Operators of another tenant get the same answer as for a missing tenant
    resource, so nothing about other tenants is revealed.
    """

    message = "You do not have access to this tenant."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated and user.is_active):
            return False

        tenant = getattr(request, 'tenant', None)
        if tenant is None:
            return False

        if user.tenant_id != tenant.id:
            logger.warning(
                f"User {user.pk} (tenant {user.tenant_id}) denied access to tenant {tenant.slug}"
            )
            return False
        return True
