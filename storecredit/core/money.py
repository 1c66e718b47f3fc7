"""Decimal helpers and display formatting for monetary amounts."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def to_money(value: object) -> Decimal:
    """Coerce a numeric value to a two-place Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: object, currency: str) -> str:
    """Format an amount for display, e.g. ``-$10.00`` or ``12.50 CHF``."""
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{sign}{symbol}{abs(value):,.2f}"
    return f"{sign}{abs(value):,.2f} {currency.upper()}"
