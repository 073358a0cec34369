"""
Orders serializers package.
"""

from .order_serializers import (
    OrderLineSerializer,
    OrderSerializer,
    OrderTrackingSerializer,
    order_snapshot,
)
from .status_serializers import OrderTransitionSerializer

__all__ = [
    'OrderLineSerializer',
    'OrderSerializer',
    'OrderTrackingSerializer',
    'OrderTransitionSerializer',
    'order_snapshot',
]
