import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .managers import TenantManager


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each customer restaurant is a tenant.

    Customers reach a tenant through its slug: /r/{slug}?table={code}
    """

    class ServiceType(models.TextChoices):
        TABLE = "TABLE", "Table service"
        PICKUP = "PICKUP", "Pickup"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the restaurant (e.g., Joe's Pizza)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier used in customer links"
    )

    currency = models.CharField(
        max_length=3,
        default="usd",
        help_text="ISO 4217 currency code, lower case as Stripe expects"
    )
    tax_rate_bps = models.PositiveIntegerField(
        default=0,
        validators=[MaxValueValidator(10000)],
        help_text="Sales tax in basis points (875 = 8.75%)"
    )
    default_tip_bps = models.PositiveIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(10000)],
        help_text="Tip applied when the customer does not choose one"
    )
    service_type = models.CharField(
        max_length=10,
        choices=ServiceType.choices,
        default=ServiceType.TABLE,
    )

    # Stripe Connect
    stripe_account_id = models.CharField(max_length=255, blank=True, null=True)
    charges_enabled = models.BooleanField(
        default=False,
        help_text="Mirrors the connected account's charges_enabled flag"
    )

    # Status
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot take orders"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['stripe_account_id'], name='tenants_stripe__6a1f0b_idx'),
            models.Index(fields=['is_active'], name='tenants_is_acti_2c9d4e_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def payments_ready(self):
        """True when the connected account can accept card payments."""
        return bool(self.stripe_account_id) and self.charges_enabled

    @property
    def requires_table(self):
        return self.service_type == self.ServiceType.TABLE


class Table(models.Model):
    """
    A physical table whose QR code points at the restaurant menu.

    ``code`` is the short token printed in the QR link.
    """
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name='tables',
    )
    label = models.CharField(max_length=50, help_text="Shown to staff, e.g. 'Patio 4'")
    code = models.SlugField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['label']
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'code'],
                name='unique_table_code_per_tenant'
            ),
        ]

    def __str__(self):
        return f"{self.label} ({self.tenant.slug})"
