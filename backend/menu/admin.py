from django.contrib import admin

from core_backend.admin import TenantAdminMixin

from .models import MenuCategory, MenuItem, Modifier


class ModifierInline(admin.TabularInline):
    model = Modifier
    extra = 1
    fields = ('name', 'type', 'price_delta_cents', 'is_required')


@admin.register(MenuCategory)
class MenuCategoryAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ('name', 'tenant', 'sort_order')
    search_fields = ('name',)


@admin.register(MenuItem)
class MenuItemAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ('name', 'tenant', 'category', 'price_cents', 'is_available', 'sort_order')
    list_filter = ('is_available',)
    list_editable = ('is_available',)
    search_fields = ('name', 'description')
    inlines = [ModifierInline]

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        if db_field.name == 'category':
            kwargs['queryset'] = MenuCategory.all_objects.select_related('tenant')
        return super().formfield_for_foreignkey(db_field, request, **kwargs)
