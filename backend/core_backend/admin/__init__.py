"""
Admin utilities for the core_backend app.
"""

from .mixins import ReadOnlyInlineMixin, TenantAdminMixin

__all__ = [
    'TenantAdminMixin',
    'ReadOnlyInlineMixin',
]
