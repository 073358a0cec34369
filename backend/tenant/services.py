import logging

from core_backend.exceptions import (
    PaymentsNotConfiguredError,
    TableNotFoundError,
    TenantNotFoundError,
)

from .models import Table, Tenant

logger = logging.getLogger(__name__)


class TenantService:
    """Resolution of the restaurant (and table) a customer is ordering from."""

    @staticmethod
    def get_active_tenant(slug):
        try:
            return Tenant.objects.get(slug=slug, is_active=True)
        except Tenant.DoesNotExist:
            raise TenantNotFoundError(f"Restaurant '{slug}' not found")

    @staticmethod
    def get_table(tenant, table_code):
        """
        Resolve the table for a tenant.

        TABLE-service restaurants require a table code; PICKUP restaurants
        ignore a missing one but still reject an unknown code.
        """
        if not table_code:
            if tenant.requires_table:
                raise TableNotFoundError("This restaurant requires a table code")
            return None

        try:
            return Table.all_objects.get(tenant=tenant, code=table_code)
        except Table.DoesNotExist:
            raise TableNotFoundError(f"Table '{table_code}' not found")

    @staticmethod
    def resolve_for_ordering(slug, table_code=None):
        tenant = TenantService.get_active_tenant(slug)
        table = TenantService.get_table(tenant, table_code)
        return tenant, table

    @staticmethod
    def ensure_payments_ready(tenant):
        if not tenant.payments_ready:
            logger.info(f"Tenant {tenant.slug} is not accepting payments")
            raise PaymentsNotConfiguredError(
                f"Restaurant '{tenant.slug}' has no active payment account"
            )
