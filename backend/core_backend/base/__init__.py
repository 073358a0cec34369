"""
Core backend base components.

Staff-facing views build on these so tenant scoping and query optimization
behave the same way everywhere.
"""

from .mixins import SerializerOptimizedMixin, TenantContextMixin
from .permissions import IsTenantStaff
from .viewsets import TenantScopedViewSet

__all__ = [
    # ViewSets
    'TenantScopedViewSet',

    # Mixins
    'TenantContextMixin',
    'SerializerOptimizedMixin',

    # Permissions
    'IsTenantStaff',
]
