"""
Realtime order notifications.

The lifecycle service publishes an order snapshot after every committed
change; staff boards subscribed to the tenant's group receive it over
WebSocket. Delivery is at-most-once and best-effort.
"""
import logging
from abc import ABC, abstractmethod

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def board_group_name(tenant_id):
    """Channel layer group for a tenant's staff order board."""
    return f"tenant_{tenant_id}_orders"


class NotificationError(Exception):
    """The realtime transport could not accept the message."""


class OrderNotifier(ABC):
    """Interface for broadcasting order snapshots to dashboards."""

    @abstractmethod
    def publish(self, snapshot):
        """
        Broadcast one order snapshot.

        ``snapshot`` is a JSON-serializable dict that carries at least
        ``id``, ``tenant_id`` and ``status``. Implementations may raise;
        callers treat every failure as non-fatal.
        """


class ChannelsOrderNotifier(OrderNotifier):
    """Publishes to the Django Channels layer configured in settings."""

    message_type = "order_update"

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        return self._channel_layer or get_channel_layer()

    def publish(self, snapshot):
        channel_layer = self.channel_layer
        if channel_layer is None:
            raise NotificationError("Channel layer not available")

        group_name = board_group_name(snapshot["tenant_id"])
        logger.debug(f"Broadcasting {self.message_type} for order {snapshot['id']} to {group_name}")
        async_to_sync(channel_layer.group_send)(
            group_name,
            {"type": self.message_type, "order": snapshot},
        )
