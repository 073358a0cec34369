import secrets
import string
import uuid

from django.db import IntegrityError, models, transaction
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager

ORDER_CODE_ALPHABET = string.digits + string.ascii_uppercase
ORDER_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 5


def generate_order_code():
    """Random 6-character base-36 code, e.g. 'K3Z09Q'."""
    return "".join(secrets.choice(ORDER_CODE_ALPHABET) for i in range(ORDER_CODE_LENGTH))


class Order(models.Model):
    class Status(models.TextChoices):
        NEW = "NEW", _("New")  # Created at checkout, awaiting payment
        PAID = "PAID", _("Paid")
        IN_PROGRESS = "IN_PROGRESS", _("In progress")
        READY = "READY", _("Ready")
        DELIVERED = "DELIVERED", _("Delivered")
        CANCELED = "CANCELED", _("Canceled")

    TERMINAL_STATUSES = (Status.DELIVERED, Status.CANCELED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='orders',
    )
    table = models.ForeignKey(
        'tenant.Table',
        on_delete=models.PROTECT,
        related_name='orders',
        null=True,
        blank=True,
        help_text=_("Null for pickup orders"),
    )
    code = models.CharField(
        max_length=ORDER_CODE_LENGTH,
        blank=True,
        help_text=_("Short code shown to the customer and on the board; unique per tenant"),
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.NEW, db_index=True
    )

    # --- Financial snapshot (minor units) ---
    subtotal_cents = models.PositiveIntegerField(default=0)
    tax_cents = models.PositiveIntegerField(default=0)
    tip_cents = models.PositiveIntegerField(default=0)
    total_cents = models.PositiveIntegerField(
        default=0,
        help_text=_("subtotal + tax + tip; replaced by the captured amount when payment completes"),
    )

    stripe_session_id = models.CharField(
        max_length=255, unique=True, null=True, blank=True,
        help_text=_("Checkout Session id; set once, right after the session is created"),
    )
    notes = models.TextField(blank=True, null=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        # Newest orders first on the board
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=['tenant', 'status', '-created_at'], name='order_board_idx'),
            models.Index(fields=['status', 'created_at'], name='order_abandoned_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "code"],
                name="unique_order_code_per_tenant",
            ),
        ]

    def __str__(self):
        return f"Order {self.code or self.pk} - {self.status}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def save(self, *args, **kwargs):
        # Generate code only if it's not already set
        if self.code:
            return super().save(*args, **kwargs)

        for attempt in range(MAX_CODE_ATTEMPTS):
            self.code = generate_order_code()
            try:
                # Savepoint so a collision does not poison the outer transaction
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                collided = Order.all_objects.filter(tenant_id=self.tenant_id, code=self.code).exists()
                if not collided:
                    raise
        raise IntegrityError("Failed to generate a unique order code after multiple retries.")


# Staff and webhook transitions; DELIVERED and CANCELED are terminal
VALID_STATUS_TRANSITIONS = {
    Order.Status.NEW: [Order.Status.PAID, Order.Status.CANCELED],
    Order.Status.PAID: [Order.Status.IN_PROGRESS, Order.Status.CANCELED],
    Order.Status.IN_PROGRESS: [Order.Status.READY, Order.Status.CANCELED],
    Order.Status.READY: [Order.Status.DELIVERED, Order.Status.CANCELED],
    Order.Status.DELIVERED: [],
    Order.Status.CANCELED: [],
}


class OrderLine(models.Model):
    """
    One line of an order. Immutable snapshot of the menu item as it was sold:
    later menu edits never change historical orders.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="lines")
    menu_item = models.ForeignKey(
        'menu.MenuItem',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_lines',
        help_text=_("Source item; kept for reporting, never used for pricing"),
    )
    name = models.CharField(max_length=200, help_text=_("Item name at time of sale"))
    quantity = models.PositiveIntegerField()
    unit_price_cents = models.PositiveIntegerField(
        help_text=_("Item price at time of sale, excluding modifiers"),
    )
    selected_modifiers = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Ordered list of {name, price_delta_cents} snapshots"),
    )
    notes = models.TextField(blank=True, null=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def modifier_total_cents(self):
        return sum(m["price_delta_cents"] for m in self.selected_modifiers)

    @property
    def line_total_cents(self):
        return (self.unit_price_cents + self.modifier_total_cents) * self.quantity
