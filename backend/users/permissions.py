from rest_framework import permissions

from .models import User


class IsManagerOrHigher(permissions.BasePermission):
    """Restaurant owners and managers; staff may only read and work orders."""

    message = "Only owners and managers can do this."
    allowed_roles = (User.Role.OWNER, User.Role.MANAGER)

    def has_permission(self, request, view):
        return getattr(request.user, "role", None) in self.allowed_roles
