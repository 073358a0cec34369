from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import OrderTrackView, OrderViewSet

app_name = "orders"

router = DefaultRouter()
router.register(r"", OrderViewSet, basename="order")

urlpatterns = [
    # Must come before the router so "track" is not read as an order id
    path("track/<uuid:pk>/", OrderTrackView.as_view(), name="order-track"),
    path("", include(router.urls)),
]
