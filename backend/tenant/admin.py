from django.contrib import admin

from .models import Table, Tenant


class TableInline(admin.TabularInline):
    """Inline editor for tables within Tenant admin."""
    model = Table
    extra = 0
    fields = ['label', 'code']


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'slug',
        'service_type',
        'charges_enabled',
        'is_active',
        'created_at',
    ]
    list_filter = ['is_active', 'service_type', 'charges_enabled']
    search_fields = ['name', 'slug', 'stripe_account_id']
    readonly_fields = ['id', 'created_at', 'updated_at']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [TableInline]

    fieldsets = (
        ('Basic Info', {
            'fields': ('id', 'name', 'slug', 'service_type')
        }),
        ('Pricing', {
            'fields': ('currency', 'tax_rate_bps', 'default_tip_bps')
        }),
        ('Stripe Connect', {
            'fields': ('stripe_account_id', 'charges_enabled')
        }),
        ('Status', {
            'fields': ('is_active', 'created_at', 'updated_at')
        }),
    )
