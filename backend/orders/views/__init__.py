from .order_views import OrderTrackView, OrderViewSet

__all__ = ["OrderTrackView", "OrderViewSet"]
