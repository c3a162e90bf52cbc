import logging

from django.http import JsonResponse

from .models import Tenant
from .managers import set_current_tenant

logger = logging.getLogger(__name__)


class TenantMiddleware:
    """
    Resolves the tenant named in the URL and attaches it to request.tenant.

    All POS endpoints are routed as /api/tenants/<tenant_slug>/..., so the
    slug is read from the resolved view kwargs in process_view:

    - Unknown slug  -> 404 TENANT_NOT_FOUND
    - Inactive      -> 403 TENANT_INACTIVE
    - No slug in the route (health check, auth, admin) -> request.tenant = None

    The thread-local context used by TenantManager is always cleared once the
    response has been produced.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.tenant = None
        set_current_tenant(None)
        try:
            return self.get_response(request)
        finally:
            # CRITICAL: Even if the view raises, prevent tenant leakage to the next request
            set_current_tenant(None)

    def process_view(self, request, view_func, view_args, view_kwargs):
        tenant_slug = view_kwargs.get('tenant_slug')
        if not tenant_slug:
            return None

        try:
            tenant = Tenant.objects.get(slug=tenant_slug)
        except Tenant.DoesNotExist:
            logger.warning(f"Request for unknown tenant slug '{tenant_slug}'")
            return JsonResponse({
                'success': False,
                'error': 'Tenant not found',
                'code': 'TENANT_NOT_FOUND'
            }, status=404)

        if not tenant.is_active:
            return JsonResponse({
                'success': False,
                'error': 'Tenant account is inactive',
                'code': 'TENANT_INACTIVE'
            }, status=403)

        request.tenant = tenant
        set_current_tenant(tenant)
        return None
