"""Defensive numeric coercion shared by the document model and the calculator."""

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Hours and rates above this are not usable numbers. Keeps every product and
# sum the calculator forms well inside the default Decimal context.
MAX_NUMBER = Decimal("1e12")


def safe_number(value: Any) -> Decimal:
    """
    Coerce any input to a finite, non-negative Decimal.

    Anything that is not a usable number (None, booleans, blank or
    non-numeric text, NaN, infinities, negatives, anything above
    ``MAX_NUMBER``) reads as zero. Floats go
    through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather than its
    binary expansion.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            return ZERO
    else:
        raw = str(value).strip().replace(",", "").lstrip("$")
        if not raw:
            return ZERO
        try:
            number = Decimal(raw)
        except InvalidOperation:
            return ZERO

    if not number.is_finite() or number < 0 or number > MAX_NUMBER:
        return ZERO
    return number


def clamp_percent(value: Any) -> Decimal:
    """Coerce a percentage to a Decimal inside [0, 100]."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if number.is_nan():
        return ZERO
    if number < 0:
        return ZERO
    if number > HUNDRED:
        return HUNDRED
    return number


def finite_or_zero(value: Any) -> Decimal:
    """Display guard: any non-finite or unparseable value becomes zero."""
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    return number if number.is_finite() else ZERO
