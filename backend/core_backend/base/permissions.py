from rest_framework.permissions import BasePermission


class IsTenantStaff(BasePermission):
    """
    Authenticated user bound to an active tenant.

    Superusers without a tenant are rejected here; they work through the
    Django admin instead.
    """

    message = "Staff account is not attached to an active restaurant."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        tenant = getattr(user, 'tenant', None)
        return tenant is not None and tenant.is_active
