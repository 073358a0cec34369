import django_filters

from .models import Order


class CharInFilter(django_filters.BaseInFilter, django_filters.CharFilter):
    pass


class OrderFilter(django_filters.FilterSet):
    """
    Board filters. ``status`` accepts a comma-separated list so the board can
    load several columns at once, e.g. ``?status=PAID,IN_PROGRESS``.
    """

    status = CharInFilter(field_name='status')
    created_at__gte = django_filters.DateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_at__lte = django_filters.DateTimeFilter(field_name='created_at', lookup_expr='lte')
    table = django_filters.CharFilter(field_name='table__code')

    class Meta:
        model = Order
        fields = ['status', 'table']
