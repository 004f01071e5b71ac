"""Pricing formulas and money formatting."""

from .calculator import (
    GST_RATE,
    document_totals,
    line_cost,
    line_cost_with_tax,
    scope_hours,
    scope_subtotal,
    scope_total_with_tax,
)
from .formatting import format_currency, format_hours, format_percent, round_currency

__all__ = [
    "GST_RATE",
    "document_totals",
    "line_cost",
    "line_cost_with_tax",
    "scope_hours",
    "scope_subtotal",
    "scope_total_with_tax",
    "format_currency",
    "format_hours",
    "format_percent",
    "round_currency",
]
