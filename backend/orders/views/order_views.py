import logging

from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core_backend.base import TenantScopedViewSet
from core_backend.exceptions import NotFoundError
from orders.factories import get_lifecycle_service
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderSerializer,
    OrderTrackingSerializer,
    OrderTransitionSerializer,
)

logger = logging.getLogger(__name__)


class OrderViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   TenantScopedViewSet):
    """
    Staff order board.

    Orders are never created or edited here: creation happens at checkout
    and every status change goes through ``transition``.
    """

    model = Order
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    ordering_fields = ['created_at', 'updated_at', 'total_cents']
    ordering = ['-created_at']

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        """
        Move the order to ``status``. Illegal or stale transitions come back
        as 409 with the current status and the legal targets.
        """
        serializer = OrderTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = get_lifecycle_service().transition(
            pk, serializer.validated_data['status'], request.tenant
        )
        logger.info(
            f"User {request.user.pk} moved order {order.code} to {order.status}"
        )
        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data)


class OrderTrackView(APIView):
    """Public order status page reached from the payment success redirect."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, pk):
        order = (
            Order.all_objects.select_related('tenant', 'table')
            .prefetch_related('lines')
            .filter(pk=pk)
            .first()
        )
        if order is None:
            raise NotFoundError(f"Order {pk} not found")
        return Response(OrderTrackingSerializer(order).data)
