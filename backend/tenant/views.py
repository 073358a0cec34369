import logging

from rest_framework import mixins, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core_backend.base import TenantScopedViewSet
from menu.services import MenuService
from users.permissions import IsManagerOrHigher

from .models import Table
from .serializers import TablePublicSerializer, TableSerializer, TenantPublicSerializer
from .services import TenantService

logger = logging.getLogger(__name__)


class RestaurantPublicView(APIView):
    """
    Customer landing data for a QR link: restaurant, optional table and the
    currently available menu grouped by category.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, slug):
        tenant = TenantService.get_active_tenant(slug)
        TenantService.ensure_payments_ready(tenant)

        # Browsing without a table is allowed; only a given code must resolve
        table_code = request.query_params.get('table')
        table = TenantService.get_table(tenant, table_code) if table_code else None

        return Response({
            'restaurant': TenantPublicSerializer(tenant).data,
            'table': TablePublicSerializer(table).data if table else None,
            'menu': MenuService.public_menu(tenant),
        })


class TableViewSet(mixins.ListModelMixin,
                   mixins.CreateModelMixin,
                   mixins.DestroyModelMixin,
                   TenantScopedViewSet):
    """Staff management of the restaurant's tables."""

    model = Table
    serializer_class = TableSerializer
    pagination_class = None

    def get_permissions(self):
        if self.action in ('create', 'destroy'):
            return super().get_permissions() + [IsManagerOrHigher()]
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        table = self.get_object()
        if table.orders.exists():
            return Response(
                {'error': {'kind': 'table_in_use', 'message': 'Table has orders and cannot be deleted.'}},
                status=status.HTTP_409_CONFLICT,
            )
        logger.info(f"Deleting table {table.code} for tenant {table.tenant_id}")
        table.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
