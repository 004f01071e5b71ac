#!/usr/bin/env python3
"""
Unit tests for the pricing calculator and money formatting.
"""

from decimal import Decimal

import pytest

from src.common.numbers import MAX_NUMBER, clamp_percent, safe_number
from src.documents.models import LineItem, Scope, SOWDocument
from src.pricing import (
    document_totals,
    format_currency,
    format_hours,
    line_cost,
    round_currency,
    scope_hours,
    scope_subtotal,
    scope_total_with_tax,
)


def _document(*items, discount=0):
    return SOWDocument(scopes=[Scope(id="scope-1", line_items=list(items))], discount_percent=discount)


class TestDocumentTotals:
    """Worked pricing scenarios."""

    def test_empty_document_is_all_zero(self):
        totals = document_totals(SOWDocument())

        assert totals.subtotal == 0
        assert totals.discount_amount == 0
        assert totals.after_discount == 0
        assert totals.tax == 0
        assert totals.grand_total == 0

    def test_single_item_no_discount(self, single_item_document):
        totals = document_totals(single_item_document)

        assert totals.subtotal == Decimal("1000")
        assert totals.after_discount == totals.subtotal
        assert totals.tax == Decimal("100")
        assert totals.grand_total == Decimal("1100")
        assert not totals.has_discount

    def test_single_item_with_discount(self, single_item_document):
        single_item_document.discount_percent = 10

        totals = document_totals(single_item_document)

        assert totals.discount_amount == Decimal("100")
        assert totals.after_discount == Decimal("900")
        assert totals.tax == Decimal("90")
        assert totals.grand_total == Decimal("990")
        assert totals.has_discount

    def test_invalid_hours_contribute_zero(self):
        document = _document(
            LineItem(id="row-1", hours="abc", rate=100),
            LineItem(id="row-2", hours=2, rate=50),
        )

        totals = document_totals(document)

        assert totals.subtotal == Decimal("100")

    def test_huge_values_contribute_zero(self):
        document = _document(
            LineItem(id="row-1", hours="1e600000", rate="1e600000"),
            LineItem(id="row-2", hours=2, rate=50),
        )

        totals = document_totals(document)

        assert totals.subtotal == Decimal("100")
        assert totals.grand_total == Decimal("110")

    def test_two_scopes_grand_total_matches_scope_totals(self, two_scope_document, tax_rate):
        totals = document_totals(two_scope_document, tax_rate)
        scope_totals = [scope_total_with_tax(s, tax_rate) for s in two_scope_document.scopes]

        assert scope_totals == [Decimal("1100"), Decimal("550")]
        assert totals.grand_total == Decimal("1650")
        assert totals.grand_total == sum(scope_totals)

    def test_discount_write_is_clamped(self):
        document = SOWDocument()
        document.discount_percent = 150

        assert document.discount_percent == Decimal("100")
        assert document_totals(document).grand_total == 0

    def test_custom_tax_rate(self, single_item_document):
        totals = document_totals(single_item_document, tax_rate="0.15")

        assert totals.tax == Decimal("150")
        assert totals.grand_total == Decimal("1150")

    def test_does_not_mutate_document(self):
        item = LineItem(id="row-1", hours="7.5", rate="abc")
        document = _document(item)

        document_totals(document)

        assert item.hours == "7.5"
        assert item.rate == "abc"

    def test_removing_line_item_recomputes(self):
        document = _document(
            LineItem(id="row-1", hours=10, rate=100),
            LineItem(id="row-2", hours=1, rate=200),
        )
        assert document_totals(document).subtotal == Decimal("1200")

        document.scopes[0].line_items.pop()

        assert document_totals(document).subtotal == Decimal("1000")


class TestTotalsProperties:
    """Invariants that hold for any input."""

    @pytest.mark.parametrize("discount", [-5, 0, 12.5, 33, 100, 250, "abc", None, float("nan")])
    def test_grand_total_identity(self, discount):
        document = _document(
            LineItem(id="row-1", hours="3.3", rate="123.45"),
            LineItem(id="row-2", hours=7, rate=99.99),
            discount=discount,
        )

        totals = document_totals(document)

        assert Decimal("0") <= totals.discount_percent <= Decimal("100")
        assert totals.grand_total == totals.after_discount + totals.after_discount * totals.tax_rate
        assert totals.after_discount == totals.subtotal - totals.discount_amount
        assert totals.grand_total >= 0

    def test_subtotal_is_sum_of_line_costs(self):
        items = [
            LineItem(id="row-1", hours=2, rate=10),
            LineItem(id="row-2", hours="1.5", rate="20"),
            LineItem(id="row-3", hours=None, rate=30),
        ]
        scope = Scope(id="scope-1", line_items=items)

        assert scope_subtotal(scope) == sum(line_cost(i) for i in items)
        assert scope_hours(scope) == Decimal("3.5")


class TestNumberCoercion:
    """Tests for defensive numeric coercion."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (10, Decimal("10")),
            (0.1, Decimal("0.1")),
            ("1,234.50", Decimal("1234.50")),
            ("$99", Decimal("99")),
            ("", Decimal("0")),
            ("abc", Decimal("0")),
            (None, Decimal("0")),
            (True, Decimal("0")),
            (-5, Decimal("0")),
            (float("inf"), Decimal("0")),
            (float("nan"), Decimal("0")),
            ("1e13", Decimal("0")),
            (MAX_NUMBER, MAX_NUMBER),
        ],
    )
    def test_safe_number(self, raw, expected):
        assert safe_number(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [(-1, 0), (0, 0), (55, 55), (100, 100), (101, 100), ("12.5", Decimal("12.5")), ("x", 0)],
    )
    def test_clamp_percent(self, raw, expected):
        assert clamp_percent(raw) == Decimal(expected)


class TestFormatting:
    """Tests for display formatting."""

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(0) == "$0.00"
        assert format_currency(Decimal("1650")) == "$1,650.00"

    def test_rounds_half_up_at_display(self):
        assert round_currency(Decimal("0.125")) == Decimal("0.13")
        assert format_currency(Decimal("2.675")) == "$2.68"

    def test_non_finite_displays_as_zero(self):
        assert format_currency(Decimal("NaN")) == "$0.00"
        assert format_currency(float("inf")) == "$0.00"

    def test_format_hours(self):
        assert format_hours(10) == "10"
        assert format_hours("7.5") == "7.5"
        assert format_hours(Decimal("8.00")) == "8"
        assert format_hours("abc") == "0"

    def test_rounds_amounts_beyond_default_precision(self):
        assert round_currency(Decimal("1e30")) == Decimal("1e30")
        assert round_currency(Decimal("1e30")).as_tuple().exponent == -2
        assert format_currency(Decimal("123456789012345678901234567.125")) == (
            "$123,456,789,012,345,678,901,234,567.13"
        )

    def test_largest_document_formats(self):
        items = [LineItem(id=f"row-{n}", hours=MAX_NUMBER, rate=MAX_NUMBER) for n in range(100)]
        totals = document_totals(_document(*items))

        assert totals.grand_total == Decimal("1.1e26")
        assert format_currency(totals.grand_total) == f"${110 * 10**24:,}.00"
