"""
Order pricing calculator.

Pure functions converting a resolved cart into a price breakdown, all in
integer minor units (cents). Nothing here touches the database: the cart
lines passed in are already re-priced from the authoritative menu by
``menu.services.MenuService.resolve_cart``.

Rounding rule: tax and tip are rounded half-up to the whole cent
(see ``payments.money.apply_bps``). Tip is computed on subtotal + tax.

Usage:
    from orders.calculators import CartLine, compute_totals

    breakdown = compute_totals(
        [CartLine(unit_price_cents=1299, quantity=2)],
        tax_rate_bps=875,
        tip_rate_bps=1800,
    )
    breakdown.total_cents  # 3334
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from core_backend.exceptions import InvalidCartError
from payments.money import MAX_BPS, apply_bps


@dataclass(frozen=True)
class ModifierSelection:
    """Snapshot of one selected modifier as it is stored on the order line."""

    name: str
    price_delta_cents: int

    def as_dict(self):
        return {"name": self.name, "price_delta_cents": self.price_delta_cents}


@dataclass(frozen=True)
class CartLine:
    """One priced cart line: a menu item, its selected modifiers and a quantity."""

    unit_price_cents: int
    quantity: int
    modifiers: Sequence[ModifierSelection] = field(default_factory=tuple)
    name: str = ""
    menu_item_id: Optional[int] = None
    notes: Optional[str] = None
    is_available: bool = True

    @property
    def modifier_total_cents(self) -> int:
        return sum(m.price_delta_cents for m in self.modifiers)

    @property
    def unit_total_cents(self) -> int:
        """Unit price including modifiers; this is what Stripe charges per unit."""
        return self.unit_price_cents + self.modifier_total_cents

    @property
    def line_total_cents(self) -> int:
        return self.unit_total_cents * self.quantity


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal_cents: int
    tax_cents: int
    tip_cents: int
    total_cents: int

    def as_dict(self):
        return {
            "subtotal_cents": self.subtotal_cents,
            "tax_cents": self.tax_cents,
            "tip_cents": self.tip_cents,
            "total_cents": self.total_cents,
        }


def _validate_rate(name: str, bps) -> None:
    if isinstance(bps, bool) or not isinstance(bps, int) or not 0 <= bps <= MAX_BPS:
        raise InvalidCartError(f"{name} must be an integer between 0 and {MAX_BPS} basis points")


def validate_lines(lines: Sequence[CartLine]) -> None:
    """Reject carts the calculator cannot price."""
    if not lines:
        raise InvalidCartError("Cart is empty")

    for index, line in enumerate(lines):
        label = line.name or f"line {index + 1}"
        if line.quantity < 1:
            raise InvalidCartError(f"Quantity for {label} must be at least 1")
        if not line.is_available:
            raise InvalidCartError(f"{label} is not available")
        if line.unit_price_cents < 0:
            raise InvalidCartError(f"Price for {label} cannot be negative")
        if line.unit_total_cents < 0:
            raise InvalidCartError(f"Modifiers for {label} make its price negative")


def compute_totals(lines: List[CartLine], tax_rate_bps: int, tip_rate_bps: int) -> PriceBreakdown:
    """
    Price a cart.

    subtotal = sum((unit price + modifier deltas) * quantity)
    tax      = round_half_up(subtotal * tax_rate_bps / 10000)
    tip      = round_half_up((subtotal + tax) * tip_rate_bps / 10000)
    total    = subtotal + tax + tip

    Raises:
        InvalidCartError: empty cart, quantity < 1, unavailable item,
            negative price, or a rate outside [0, 10000]
    """
    _validate_rate("tax_rate_bps", tax_rate_bps)
    _validate_rate("tip_rate_bps", tip_rate_bps)
    validate_lines(lines)

    subtotal = sum(line.line_total_cents for line in lines)
    tax = apply_bps(subtotal, tax_rate_bps)
    tip = apply_bps(subtotal + tax, tip_rate_bps)

    return PriceBreakdown(
        subtotal_cents=subtotal,
        tax_cents=tax,
        tip_cents=tip,
        total_cents=subtotal + tax + tip,
    )
