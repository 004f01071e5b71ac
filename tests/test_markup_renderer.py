#!/usr/bin/env python3
"""
Unit tests for the editor markup renderer.
"""

from src.documents.models import LineItem, Scope, SOWDocument
from src.pricing import document_totals
from src.rendering import CLOSING_SENTENCE, render_markup


def _render(document):
    return render_markup(document, document_totals(document))


class TestRenderMarkup:
    """Tests for render_markup structure and figures."""

    def test_header_and_client(self, single_item_document):
        markup = _render(single_item_document)

        assert markup.startswith("<h1>Website Rebuild</h1>")
        assert "<p><strong>Client:</strong> Acme Pty Ltd</p>" in markup

    def test_scope_section(self, single_item_document):
        markup = _render(single_item_document)

        assert "<h2>Scope 1: Discovery</h2>" in markup
        assert "<p><em>Workshops and current state review</em></p>" in markup
        assert "<th><p>TOTAL COST + GST</p></th>" in markup
        assert "<td><p>$1,100.00</p></td>" in markup
        assert "<p><strong>Scope Total:</strong> $1,100.00 AUD (inc. GST)</p>" in markup

    def test_deliverables_before_pricing_and_assumptions_after(self, single_item_document):
        markup = _render(single_item_document)

        deliverables = markup.index("<h3>Deliverables</h3>")
        pricing = markup.index("<h3>Pricing</h3>")
        assumptions = markup.index("<h3>Assumptions</h3>")
        assert deliverables < pricing < assumptions
        assert "<li><p>Current state report</p></li>" in markup

    def test_financial_summary_without_discount(self, single_item_document):
        markup = _render(single_item_document)

        assert "<h2>Financial Summary</h2>" in markup
        assert "<td><p>Subtotal</p></td><td><p>$1,000.00 AUD</p></td>" in markup
        assert "<td><p>GST (10%)</p></td><td><p>+$100.00 AUD</p></td>" in markup
        assert "<strong>$1,100.00 AUD</strong>" in markup
        assert "Discount" not in markup
        assert "After Discount" not in markup

    def test_financial_summary_with_discount(self, single_item_document):
        single_item_document.discount_percent = 10

        markup = _render(single_item_document)

        assert "<td><p>Discount (10%)</p></td><td><p>-$100.00 AUD</p></td>" in markup
        assert "<td><p>After Discount</p></td><td><p>$900.00 AUD</p></td>" in markup
        assert "<td><p>GST (10%)</p></td><td><p>+$90.00 AUD</p></td>" in markup
        assert "<strong>$990.00 AUD</strong>" in markup

    def test_scopes_separated_by_rules(self, two_scope_document):
        markup = _render(two_scope_document)

        first = markup.index("<h2>Scope 1: Build</h2>")
        second = markup.index("<h2>Scope 2: Support</h2>")
        assert "<hr>" in markup[first:second]

    def test_optional_sections(self, two_scope_document):
        markup = _render(two_scope_document)

        assert "<h2>Project Overview</h2>" in markup
        assert "<h2>Budget Notes</h2>" in markup
        assert markup.endswith(f"<p><em>{CLOSING_SENTENCE}</em></p>")

    def test_omits_empty_optional_sections(self, single_item_document):
        markup = _render(single_item_document)

        assert "Project Overview" not in markup
        assert "Budget Notes" not in markup

    def test_scope_without_items_has_no_table(self):
        document = SOWDocument(project_title="Empty", scopes=[Scope(id="scope-1", title="Later")])

        markup = _render(document)

        assert "<table>" in markup
        assert markup.count("<table>") == 1
        assert "<p><strong>Scope Total:</strong> $0.00 AUD (inc. GST)</p>" in markup

    def test_free_text_is_escaped(self):
        document = SOWDocument(
            client_name="<script>alert(1)</script>",
            project_title="R&D",
            scopes=[
                Scope(
                    id="scope-1",
                    title="<b>x</b>",
                    line_items=[LineItem(id="row-1", task='"quoted"', role_name="<i>")],
                    deliverables=["<img src=x>"],
                )
            ],
        )

        markup = _render(document)

        assert "<script>" not in markup
        assert "&lt;script&gt;" in markup
        assert "<h1>R&amp;D</h1>" in markup
        assert "&lt;img src=x&gt;" in markup
        assert "&quot;quoted&quot;" in markup

    def test_render_is_deterministic(self, two_scope_document):
        assert _render(two_scope_document) == _render(two_scope_document)

    def test_invalid_numbers_render_as_zero(self):
        document = SOWDocument(
            scopes=[Scope(id="scope-1", line_items=[LineItem(id="row-1", hours="abc", rate="xyz")])]
        )

        markup = _render(document)

        assert "<td><p>0</p></td>" in markup
        assert "<td><p>$0.00</p></td>" in markup
