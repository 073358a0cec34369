"""
Monetary helpers for integer minor-unit (cents) arithmetic.

Key principles:
1. Money is always an int in minor units; never float
2. Basis-point multiplication goes through Decimal and rounds ROUND_HALF_UP,
   so 0.5 cent always rounds away from zero (1234.5 -> 1235)
3. Stripe receives the same integers the database stores
"""

from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

BPS_DENOMINATOR = 10000
MAX_BPS = 10000

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "AUD": 2,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "KRW": "₩",
}


def apply_bps(amount_minor: int, bps: int) -> int:
    """
    Return ``amount_minor * bps / 10000`` rounded half-up to a whole minor unit.

    Examples:
        >>> apply_bps(2598, 875)
        227
        >>> apply_bps(2825, 1800)
        509
    """
    if amount_minor < 0:
        raise ValueError(f"amount_minor must be non-negative, got {amount_minor}")
    if not 0 <= bps <= MAX_BPS:
        raise ValueError(f"bps must be within [0, {MAX_BPS}], got {bps}")

    exact = Decimal(amount_minor) * Decimal(bps) / Decimal(BPS_DENOMINATOR)
    return int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def platform_fee_cents(total_minor: int) -> int:
    """
    Application fee the platform keeps on a Connect direct charge.

    Percentage part plus fixed part, never more than the charge itself.
    """
    fee = apply_bps(total_minor, settings.PLATFORM_FEE_BPS) + settings.PLATFORM_FEE_FIXED_CENTS
    return max(0, min(fee, total_minor))


def currency_exponent(currency: str) -> int:
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def format_money(currency: str, minor: int) -> str:
    """
    Format minor units as human-readable currency string.

    Examples:
        >>> format_money("usd", 1013)
        '$10.13'
        >>> format_money("JPY", 1235)
        '¥1,235'
    """
    exponent = currency_exponent(currency)
    amount = Decimal(minor).scaleb(-exponent)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    return f"{symbol}{amount:,.{exponent}f}"
