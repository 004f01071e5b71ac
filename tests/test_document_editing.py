#!/usr/bin/env python3
"""
Unit tests for DocumentEditor.
"""

from decimal import Decimal

import pytest

from src.catalog import RateCatalog, RateCatalogEntry
from src.documents.editing import DocumentEditor


@pytest.fixture
def catalog():
    return RateCatalog(
        (
            RateCatalogEntry("Designer", Decimal("150")),
            RateCatalogEntry("Developer", Decimal("175")),
        )
    )


@pytest.fixture
def editor(catalog):
    editor = DocumentEditor(catalog=catalog)
    scope = editor.add_scope("Build", "Implementation")
    editor.add_line_item(scope.id, task="Pages", role_name="Designer", hours=10, rate=150)
    editor.add_line_item(scope.id, task="API", role_name="Developer", hours=4, rate=175)
    return editor


class TestScopes:
    """Tests for adding and removing scopes."""

    def test_add_scope_generates_ids(self):
        editor = DocumentEditor()

        first = editor.add_scope("One")
        second = editor.add_scope("Two")

        assert first.id == "scope-1"
        assert second.id == "scope-2"
        assert [s.title for s in editor.document.scopes] == ["One", "Two"]

    def test_remove_scope_removes_its_items(self, editor):
        editor.remove_scope("scope-1")

        assert editor.document.scopes == []
        assert editor.totals().subtotal == 0

    def test_ids_stay_unique_after_removal(self):
        editor = DocumentEditor()
        editor.add_scope("One")
        editor.add_scope("Two")
        editor.remove_scope("scope-1")

        assert editor.add_scope("Three").id == "scope-3"
        assert len({s.id for s in editor.document.scopes}) == 2

    def test_unknown_scope_raises_key_error(self, editor):
        with pytest.raises(KeyError):
            editor.remove_scope("scope-99")


class TestLineItems:
    """Tests for line item edits."""

    def test_add_line_item_coerces_numbers(self, editor):
        item = editor.add_line_item("scope-1", hours="abc", rate="$1,000")

        assert item.id == "row-3"
        assert item.hours == 0
        assert item.rate == Decimal("1000")

    def test_update_line_item(self, editor):
        editor.update_line_item("scope-1", "row-1", hours="12", task=None)

        item = editor.document.scopes[0].line_items[0]
        assert item.hours == Decimal("12")
        assert item.task == ""
        assert editor.totals().subtotal == Decimal("2500")

    def test_update_rejects_unknown_field(self, editor):
        with pytest.raises(KeyError):
            editor.update_line_item("scope-1", "row-1", colour="red")

    def test_remove_line_item_recomputes_totals(self, editor):
        assert editor.totals().subtotal == Decimal("2200")

        editor.remove_line_item("scope-1", "row-2")

        assert editor.totals().subtotal == Decimal("1500")
        assert editor.totals().grand_total == Decimal("1650")

    def test_unknown_line_item_raises_key_error(self, editor):
        with pytest.raises(KeyError):
            editor.remove_line_item("scope-1", "row-99")

    def test_move_line_item(self, editor):
        editor.move_line_item("scope-1", 1, 0)

        assert [i.id for i in editor.document.scopes[0].line_items] == ["row-2", "row-1"]

    def test_move_clamps_target(self, editor):
        editor.move_line_item("scope-1", 0, 50)

        assert [i.id for i in editor.document.scopes[0].line_items] == ["row-2", "row-1"]

    def test_move_from_bad_index(self, editor):
        with pytest.raises(IndexError):
            editor.move_line_item("scope-1", 5, 0)


class TestSelectRole:
    """Tests for picking a role from the rate card."""

    def test_known_role_sets_rate(self, editor):
        item = editor.select_role("scope-1", "row-1", "Developer")

        assert item.role_name == "Developer"
        assert item.rate == Decimal("175")

    def test_unknown_role_keeps_rate(self, editor):
        item = editor.select_role("scope-1", "row-1", "Copywriter")

        assert item.role_name == "Copywriter"
        assert item.rate == Decimal("150")

    def test_empty_catalog_keeps_rate(self):
        editor = DocumentEditor()
        scope = editor.add_scope()
        item = editor.add_line_item(scope.id, rate=90)

        editor.select_role(scope.id, item.id, "Designer")

        assert item.rate == Decimal("90")


class TestDiscountAndLists:
    """Tests for discount writes and deliverable/assumption lists."""

    @pytest.mark.parametrize("raw, stored", [(150, 100), (-10, 0), ("abc", 0), ("15", 15)])
    def test_set_discount_clamps(self, editor, raw, stored):
        editor.set_discount(raw)

        assert editor.document.discount_percent == Decimal(stored)

    def test_deliverables_and_assumptions(self, editor):
        editor.add_deliverable("scope-1", "  Style guide ")
        editor.add_deliverable("scope-1", "   ")
        editor.add_assumption("scope-1", "Content supplied by client")

        scope = editor.document.scopes[0]
        assert scope.deliverables == ["Style guide"]
        assert scope.assumptions == ["Content supplied by client"]

        assert editor.remove_deliverable("scope-1", 0) == "Style guide"
        assert editor.remove_assumption("scope-1", 0) == "Content supplied by client"
        assert scope.deliverables == []
