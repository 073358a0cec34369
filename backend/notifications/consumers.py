import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

from .services import board_group_name

logger = logging.getLogger(__name__)


class OrderBoardConsumer(AsyncWebsocketConsumer):
    """
    Staff kanban board feed.

    The connection joins the group of the authenticated user's tenant and
    relays every ``order_update`` published for it.
    """

    async def connect(self):
        user = self.scope.get("user")

        if user is None or not user.is_authenticated or not user.tenant_id:
            logger.warning("OrderBoardConsumer: unauthenticated connection. Closing.")
            await self.close(code=4003)  # Forbidden
            return

        self.tenant_id = user.tenant_id
        self.board_group = board_group_name(self.tenant_id)

        await self.channel_layer.group_add(self.board_group, self.channel_name)
        await self.accept()

        logger.info(f"Order board connected for tenant {self.tenant_id}")

        await self.send(
            text_data=json.dumps(
                {
                    "type": "connection_established",
                    "timestamp": self.get_timestamp(),
                }
            )
        )

    async def disconnect(self, close_code):
        if hasattr(self, "board_group"):
            await self.channel_layer.group_discard(self.board_group, self.channel_name)
            logger.info(f"Order board disconnected for tenant {self.tenant_id}")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON received on order board for tenant {self.tenant_id}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Non-object message ignored on order board for tenant {self.tenant_id}")
            return

        if data.get("type") == "ping":
            await self.send(
                text_data=json.dumps({"type": "pong", "timestamp": self.get_timestamp()})
            )
        else:
            logger.warning(f"Unknown message type on order board: {data.get('type')}")

    # Channel layer event handlers

    async def order_update(self, event):
        await self.send(
            text_data=json.dumps({"type": "order_update", "order": event["order"]})
        )

    def get_timestamp(self):
        return timezone.now().isoformat()
