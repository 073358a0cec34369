"""
Process-wide default collaborators for the orders app.

Views, tasks and commands get their services from here; tests build their
own instances with fakes instead.
"""
from functools import lru_cache

from notifications.services import ChannelsOrderNotifier

from .services import OrderLifecycleService


@lru_cache(maxsize=None)
def get_order_notifier():
    return ChannelsOrderNotifier()


@lru_cache(maxsize=None)
def get_lifecycle_service():
    return OrderLifecycleService(notifier=get_order_notifier())
