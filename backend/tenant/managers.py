from threading import local

from django.db import models

# Thread-local storage for current tenant
_thread_locals = local()


def set_current_tenant(tenant):
    """
    Set the current tenant for this thread.

    Args:
        tenant: Tenant instance or None to clear

    This is called by staff views, TenantMiddleware and Celery tasks to
    establish tenant context for the current request/task.
    """
    _thread_locals.tenant = tenant


def get_current_tenant():
    """
    Get the current tenant for this thread.

    Returns:
        Tenant instance or None if no tenant context is set
    """
    return getattr(_thread_locals, 'tenant', None)


class tenant_context:
    """
    Context manager that sets the tenant for the enclosed block and restores
    the previous one afterwards.

        with tenant_context(order.tenant):
            Order.objects.filter(...)
    """

    def __init__(self, tenant):
        self.tenant = tenant
        self.previous = None

    def __enter__(self):
        self.previous = get_current_tenant()
        set_current_tenant(self.tenant)
        return self.tenant

    def __exit__(self, exc_type, exc, tb):
        set_current_tenant(self.previous)
        return False


class TenantManager(models.Manager):
    """
    Automatically filters querysets by current tenant.

    FAILS CLOSED: Returns empty queryset if no tenant context is set.
    This prevents accidental data leakage across tenants.

    Usage:
        class MenuItem(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE)

            objects = TenantManager()  # Default manager (tenant-filtered)
            all_objects = models.Manager()  # Bypass filter for webhooks/admin

        # In a staff view:
        items = MenuItem.objects.all()  # Automatically filtered by tenant

        # In a webhook (tenant not yet known):
        order = Order.all_objects.get(stripe_session_id=session_id)
    """

    def get_queryset(self):
        """
        Return queryset filtered by current tenant.

        If no tenant context is set, returns empty queryset (fail-closed).
        """
        tenant = get_current_tenant()

        if tenant:
            return super().get_queryset().filter(tenant=tenant)

        # FAIL CLOSED: no tenant context means no rows
        return super().get_queryset().none()
