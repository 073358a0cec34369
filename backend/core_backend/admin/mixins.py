class TenantAdminMixin:
    """
    ModelAdmin mixin for tenant-owned models.

    The admin runs without tenant context (TenantMiddleware skips /admin/),
    so the default TenantManager would show nothing. Platform staff see every
    tenant's rows through ``all_objects`` and can filter by tenant.
    """

    def get_queryset(self, request):
        queryset = self.model.all_objects.all()
        ordering = self.get_ordering(request)
        if ordering:
            queryset = queryset.order_by(*ordering)
        return queryset.select_related('tenant')

    def get_list_filter(self, request):
        list_filter = list(super().get_list_filter(request))
        if 'tenant' not in list_filter:
            list_filter.insert(0, 'tenant')
        return list_filter


class ReadOnlyInlineMixin:
    """Inline whose rows are immutable snapshots."""

    can_delete = False
    extra = 0

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False
