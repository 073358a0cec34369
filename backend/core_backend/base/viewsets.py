from rest_framework import filters, viewsets
from django_filters.rest_framework import DjangoFilterBackend

from .mixins import SerializerOptimizedMixin, TenantContextMixin
from .permissions import IsTenantStaff


class TenantScopedViewSet(TenantContextMixin, SerializerOptimizedMixin, viewsets.GenericViewSet):
    """
    Base ViewSet for staff endpoints.

    Subclasses mix in the DRF list/retrieve/create mixins they need and set
    ``model``; the queryset is rebuilt per request from ``model.objects`` so
    TenantManager sees the tenant established in ``initial()``.
    """

    permission_classes = [IsTenantStaff]
    filter_backends = [
        DjangoFilterBackend,
        filters.OrderingFilter,
    ]
    model = None

    def get_queryset(self):
        self.queryset = self.model.objects.all()
        return super().get_queryset()

