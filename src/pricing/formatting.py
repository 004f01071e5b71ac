"""Display formatting for money, hours and percentages."""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from src.common.numbers import finite_or_zero, safe_number

CENTS = Decimal("0.01")


def round_currency(value: Any) -> Decimal:
    """Round half-up to cents; non-finite values display as zero."""
    amount = finite_or_zero(value)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(value: Any, symbol: str = "$") -> str:
    """Format as ``$1,234.50``: exactly two decimals with thousands separators."""
    amount = round_currency(value)
    if amount == 0:
        amount = abs(amount)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_hours(value: Any) -> str:
    """Render hours as given: ``10`` stays ``10``, ``7.5`` stays ``7.5``."""
    hours = safe_number(value)
    if hours == hours.to_integral_value():
        return f"{hours.to_integral_value():f}"
    return f"{hours.normalize():f}"


def format_percent(value: Any) -> str:
    """Render a percentage without trailing zeros, e.g. ``10`` or ``12.5``."""
    return format_hours(value)
