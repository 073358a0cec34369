from django.urls import re_path

from . import consumers

websocket_urlpatterns = [
    re_path(r"ws/orders/board/$", consumers.OrderBoardConsumer.as_asgi()),
]
