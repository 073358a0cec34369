"""
JWT WebSocket Authentication Middleware for Django Channels.

Browsers cannot set an Authorization header on a WebSocket handshake, so the
staff board passes its access token as ``?token=<jwt>`` on the connection URL.
The authenticated user is placed in ``scope["user"]`` for consumers.
"""
import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_active_user(user_id):
    User = get_user_model()
    return User.objects.select_related("tenant").get(id=user_id, is_active=True)


class JWTAuthMiddleware(BaseMiddleware):
    """
    Authenticates WebSocket connections with a simplejwt access token.

    Unauthenticated connections still reach the consumer with an
    ``AnonymousUser``; the consumer decides whether to reject them.
    """

    async def __call__(self, scope, receive, send):
        # Only process WebSocket connections
        if scope["type"] != "websocket":
            return await super().__call__(scope, receive, send)

        scope["user"] = await self.get_user_from_jwt(scope)

        return await super().__call__(scope, receive, send)

    async def get_user_from_jwt(self, scope):
        query = parse_qs(scope.get("query_string", b"").decode("utf-8"))
        tokens = query.get("token")
        if not tokens:
            logger.debug("No JWT access token found in WebSocket query string")
            return AnonymousUser()

        # Rejects expired tokens and refresh tokens
        try:
            token = AccessToken(tokens[0])
        except TokenError as e:
            logger.warning(f"Invalid JWT token in WebSocket connection: {e}")
            return AnonymousUser()

        user_id = token.get(api_settings.USER_ID_CLAIM)
        if not user_id:
            logger.warning("JWT payload missing user_id")
            return AnonymousUser()

        User = get_user_model()
        try:
            user = await get_active_user(user_id)
        except User.DoesNotExist:
            logger.warning(f"User {user_id} from JWT not found")
            return AnonymousUser()

        logger.info(
            f"WebSocket authenticated: user_id={user.id}, tenant_id={user.tenant_id}"
        )
        return user
