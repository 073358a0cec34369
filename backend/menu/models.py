from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class MenuCategory(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='menu_categories',
    )
    name = models.CharField(max_length=100)
    sort_order = models.IntegerField(
        default=0,
        help_text=_("Display order. Lower numbers appear first."),
    )

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Menu category")
        verbose_name_plural = _("Menu categories")
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name


class MenuItem(models.Model):
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='menu_items',
    )
    category = models.ForeignKey(
        MenuCategory,
        on_delete=models.CASCADE,
        related_name='items',
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price_cents = models.PositiveIntegerField(
        help_text=_("Current price in minor units. Orders snapshot it at checkout."),
    )
    is_available = models.BooleanField(default=True, db_index=True)
    sort_order = models.IntegerField(default=0)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['sort_order', 'name']
        indexes = [
            models.Index(fields=['tenant', 'is_available'], name='menu_menuit_tenant__3f7c2a_idx'),
        ]

    def __str__(self):
        return self.name


class Modifier(models.Model):
    """
    A customization option on a menu item.

    Options sharing a ``name`` form one choice group: for SINGLE modifiers the
    customer picks at most one option per name, MULTI options may be combined.
    """

    class Type(models.TextChoices):
        SINGLE = "SINGLE", _("Single choice")
        MULTI = "MULTI", _("Multiple choice")

    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.CASCADE,
        related_name='modifiers',
    )
    name = models.CharField(max_length=100)
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.MULTI)
    price_delta_cents = models.IntegerField(
        default=0,
        validators=[MinValueValidator(-100000)],
        help_text=_("Added to the item price per unit; may be negative."),
    )
    is_required = models.BooleanField(default=False)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.menu_item.name}: {self.name}"
