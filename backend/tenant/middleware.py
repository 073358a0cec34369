import logging

from django.http import JsonResponse

from .managers import set_current_tenant
from .models import Tenant

logger = logging.getLogger(__name__)


class TenantMiddleware:
    """
    Resolves the tenant for public requests and attaches it to request.tenant.

    Customer pages call the shared API with an ``X-Tenant: <slug>`` header.
    Staff requests resolve their tenant later, from the authenticated user,
    in TenantContextMixin. Requests without the header get request.tenant = None.

    The thread-local tenant context is always cleared when the request ends.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Admin operates without tenant context
        if request.path.startswith('/admin/'):
            request.tenant = None
            set_current_tenant(None)
            return self.get_response(request)

        try:
            slug = request.META.get('HTTP_X_TENANT')
            tenant = None
            if slug:
                tenant = Tenant.objects.filter(slug=slug, is_active=True).first()
                if tenant is None:
                    logger.info(f"TenantMiddleware: unknown or inactive tenant '{slug}'")
                    return JsonResponse(
                        {'error': {'kind': 'tenant_not_found', 'message': 'Restaurant not found.'}},
                        status=404,
                    )

            request.tenant = tenant
            set_current_tenant(tenant)
            return self.get_response(request)

        finally:
            # CRITICAL: prevent tenant leakage to the next request on this thread
            set_current_tenant(None)
