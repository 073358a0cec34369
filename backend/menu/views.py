from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import TenantScopedViewSet
from users.permissions import IsManagerOrHigher

from .models import MenuItem
from .serializers import AvailabilitySerializer, MenuItemSerializer
from .services import MenuService


class MenuItemViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      TenantScopedViewSet):
    """Staff view of the menu, including items currently switched off."""

    model = MenuItem
    serializer_class = MenuItemSerializer
    filterset_fields = ['category', 'is_available']
    pagination_class = None

    def get_permissions(self):
        if self.action == 'availability':
            return super().get_permissions() + [IsManagerOrHigher()]
        return super().get_permissions()

    @action(detail=True, methods=['patch'])
    def availability(self, request, pk=None):
        item = self.get_object()
        serializer = AvailabilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        MenuService.set_availability(item, serializer.validated_data['is_available'])
        return Response(MenuItemSerializer(item).data)
