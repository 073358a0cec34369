from tenant.managers import set_current_tenant


class TenantContextMixin:
    """
    Establishes tenant context from the authenticated staff user.

    DRF authenticates inside ``initial()``, after Django middleware has run,
    so this is the earliest point where ``request.user.tenant`` is known.
    The context is cleared again in ``finalize_response()``.
    """

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        tenant = getattr(request.user, 'tenant', None)
        request.tenant = tenant
        set_current_tenant(tenant)

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        set_current_tenant(None)
        return response


class SerializerOptimizedMixin:
    """
    Applies ``select_related_fields`` / ``prefetch_related_fields`` declared on
    the serializer's Meta to the view queryset.

    IMPORTANT: Child classes must build their queryset at request time so the
    tenant context is applied; a class-level queryset is evaluated at import.
    """

    def get_queryset(self):
        queryset = super().get_queryset()

        serializer_class = self.get_serializer_class()
        meta = getattr(serializer_class, "Meta", None)
        if meta is None:
            return queryset

        select_related = getattr(meta, "select_related_fields", None)
        if select_related:
            queryset = queryset.select_related(*select_related)

        prefetch_related = getattr(meta, "prefetch_related_fields", None)
        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset
