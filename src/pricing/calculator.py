"""
Pricing calculator for SOW documents.

The one place pricing formulas live. Every surface (editing table, editor
markup, print template, workbook) derives its figures from these functions:

    line_cost       = hours * rate
    scope_subtotal  = sum(line_cost)
    subtotal        = sum(scope_subtotal)
    discount_amount = subtotal * discount / 100
    after_discount  = subtotal - discount_amount
    tax             = after_discount * tax_rate
    grand_total     = after_discount + tax

Arithmetic is exact Decimal; rounding happens only when a value is
displayed. Inputs are coerced, never mutated, and nothing here raises on
bad numbers.
"""

from decimal import Decimal
from typing import Any

from src.common.config import DEFAULT_TAX_RATE
from src.common.numbers import HUNDRED, ZERO, clamp_percent, safe_number
from src.documents.models import LineItem, Scope, SOWDocument, Totals

GST_RATE = DEFAULT_TAX_RATE


def _tax_rate(tax_rate: Any) -> Decimal:
    return safe_number(tax_rate)


def _with_tax(amount: Decimal, tax_rate: Any) -> Decimal:
    return amount + amount * _tax_rate(tax_rate)


def line_cost(item: LineItem) -> Decimal:
    """Return ``hours * rate`` with invalid numbers read as zero."""
    return safe_number(getattr(item, "hours", None)) * safe_number(getattr(item, "rate", None))


def line_cost_with_tax(item: LineItem, tax_rate: Any = GST_RATE) -> Decimal:
    return _with_tax(line_cost(item), tax_rate)


def scope_subtotal(scope: Scope) -> Decimal:
    """Sum of line costs in a scope, excluding tax."""
    items = getattr(scope, "line_items", None) or []
    return sum((line_cost(item) for item in items), ZERO)


def scope_total_with_tax(scope: Scope, tax_rate: Any = GST_RATE) -> Decimal:
    return _with_tax(scope_subtotal(scope), tax_rate)


def scope_hours(scope: Scope) -> Decimal:
    items = getattr(scope, "line_items", None) or []
    return sum((safe_number(getattr(item, "hours", None)) for item in items), ZERO)


def document_totals(document: SOWDocument, tax_rate: Any = GST_RATE) -> Totals:
    """
    Compute the pricing summary of a document.

    Args:
        document: The SOW document (read only)
        tax_rate: Tax applied after discount; 10% GST by default

    Returns:
        Totals with every field a finite Decimal
    """
    rate = _tax_rate(tax_rate)
    scopes = getattr(document, "scopes", None) or []

    subtotal = sum((scope_subtotal(scope) for scope in scopes), ZERO)
    # Writes already clamp; a malformed document must still never go negative
    discount = clamp_percent(getattr(document, "discount_percent", ZERO))

    discount_amount = subtotal * discount / HUNDRED
    after_discount = subtotal - discount_amount
    tax = after_discount * rate
    grand_total = after_discount + tax

    return Totals(
        subtotal=subtotal,
        discount_percent=discount,
        discount_amount=discount_amount,
        after_discount=after_discount,
        tax=tax,
        grand_total=grand_total,
        tax_rate=rate,
    )
