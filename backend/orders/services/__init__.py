"""
Orders services package.

- OrderLifecycleService: create / transition / mark_paid and the cleanup of
  abandoned orders
"""

from .order_service import OrderLifecycleService

__all__ = [
    'OrderLifecycleService',
]
