from django.contrib import admin

from core_backend.admin import ReadOnlyInlineMixin, TenantAdminMixin
from payments.money import format_money

from .models import Order, OrderLine


class OrderLineInline(ReadOnlyInlineMixin, admin.TabularInline):
    model = OrderLine
    fields = ("name", "quantity", "unit_price_cents", "selected_modifiers", "notes", "get_line_total")
    readonly_fields = fields

    def get_line_total(self, obj):
        return format_money(obj.order.tenant.currency, obj.line_total_cents)

    get_line_total.short_description = "Line total"


@admin.register(Order)
class OrderAdmin(TenantAdminMixin, admin.ModelAdmin):
    """
    Orders are read-only here; status changes belong to the staff board.
    An order may only be deleted while it has no lines.
    """

    list_display = ("code", "tenant", "table", "status", "get_total_formatted", "paid_at", "created_at")
    list_display_links = ("code",)
    list_filter = ("status", "created_at")
    search_fields = ("code", "id", "stripe_session_id")
    ordering = ("-created_at",)
    inlines = [OrderLineInline]
    readonly_fields = (
        "id", "tenant", "table", "code", "status",
        "subtotal_cents", "tax_cents", "tip_cents", "total_cents",
        "stripe_session_id", "notes", "paid_at", "created_at", "updated_at",
    )

    def get_total_formatted(self, obj):
        return format_money(obj.tenant.currency, obj.total_cents)

    get_total_formatted.short_description = "Total"
    get_total_formatted.admin_order_field = "total_cents"

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        if obj is None:
            return super().has_delete_permission(request, obj)
        return not obj.lines.exists() and super().has_delete_permission(request, obj)

    def delete_queryset(self, request, queryset):
        # Bulk delete action: silently keep orders that have lines
        queryset.filter(lines__isnull=True).delete()
