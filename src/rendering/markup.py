"""
Editor markup renderer.

Turns a SOW document and its totals into an HTML fragment for the rich-text
editor. The output is a pure function of its inputs, and all free text is
escaped because it comes from users and from the AI assistant.

The fragment is meant for the editor's replace-content operation, which
discards whatever the editor held before (see src.integrations.editor).
"""

import html
from typing import List

from src.common.numbers import safe_number
from src.documents.models import Scope, SOWDocument, Totals
from src.pricing.calculator import line_cost_with_tax, scope_total_with_tax
from src.pricing.formatting import format_currency, format_hours, format_percent

CLOSING_SENTENCE = "This concludes the Statement of Work."

PRICING_COLUMNS = ("TASK/DESCRIPTION", "ROLE", "HOURS", "RATE")


def _esc(text) -> str:
    return html.escape("" if text is None else str(text), quote=True)


def _bullet_list(items: List[str]) -> str:
    return "<ul>" + "".join(f"<li><p>{_esc(item)}</p></li>" for item in items) + "</ul>"


def _pricing_table(scope: Scope, totals: Totals, tax_label: str) -> str:
    header_cells = "".join(f"<th><p>{name}</p></th>" for name in PRICING_COLUMNS)
    header_cells += f"<th><p>TOTAL COST + {_esc(tax_label)}</p></th>"
    rows = [f"<tr>{header_cells}</tr>"]
    for item in scope.line_items:
        rows.append(
            "<tr>"
            f"<td><p>{_esc(item.task)}</p></td>"
            f"<td><p>{_esc(item.role_name)}</p></td>"
            f"<td><p>{format_hours(item.hours)}</p></td>"
            f"<td><p>{format_currency(safe_number(item.rate))}</p></td>"
            f"<td><p>{format_currency(line_cost_with_tax(item, totals.tax_rate))}</p></td>"
            "</tr>"
        )
    return "<table><tbody>" + "".join(rows) + "</tbody></table>"


def _scope_section(index: int, scope: Scope, totals: Totals, currency: str, tax_label: str) -> List[str]:
    parts = [
        f"<h2>Scope {index}: {_esc(scope.title)}</h2>",
        f"<p><em>{_esc(scope.description)}</em></p>",
    ]

    # Deliverables come before pricing
    if scope.deliverables:
        parts.append("<h3>Deliverables</h3>")
        parts.append(_bullet_list(scope.deliverables))

    parts.append("<h3>Pricing</h3>")
    if scope.line_items:
        parts.append(_pricing_table(scope, totals, tax_label))

    scope_total = format_currency(scope_total_with_tax(scope, totals.tax_rate))
    parts.append(
        f"<p><strong>Scope Total:</strong> {scope_total} {_esc(currency)} (inc. {_esc(tax_label)})</p>"
    )

    if scope.assumptions:
        parts.append("<h3>Assumptions</h3>")
        parts.append(_bullet_list(scope.assumptions))
    return parts


def _summary_table(totals: Totals, currency: str, tax_label: str) -> str:
    cur = _esc(currency)
    rows = [("Subtotal", f"{format_currency(totals.subtotal)} {cur}")]
    if totals.has_discount:
        rows.append(
            (
                f"Discount ({format_percent(totals.discount_percent)}%)",
                f"-{format_currency(totals.discount_amount)} {cur}",
            )
        )
        rows.append(("After Discount", f"{format_currency(totals.after_discount)} {cur}"))
    rows.append(
        (
            f"{_esc(tax_label)} ({format_percent(totals.tax_rate * 100)}%)",
            f"+{format_currency(totals.tax)} {cur}",
        )
    )
    body = "".join(f"<tr><td><p>{label}</p></td><td><p>{value}</p></td></tr>" for label, value in rows)
    body += (
        "<tr><td><p><strong>Grand Total</strong></p></td>"
        f"<td><p><strong>{format_currency(totals.grand_total)} {cur}</strong></p></td></tr>"
    )
    return f"<table><tbody>{body}</tbody></table>"


def render_markup(
    document: SOWDocument,
    totals: Totals,
    currency: str = "AUD",
    tax_label: str = "GST",
) -> str:
    """
    Render a SOW document as an editor markup fragment.

    Args:
        document: Document to render (read only)
        totals: Totals computed for this document
        currency: Currency code appended to amounts
        tax_label: Name of the tax ("GST")

    Returns:
        HTML fragment
    """
    parts = [
        f"<h1>{_esc(document.project_title)}</h1>",
        f"<p><strong>Client:</strong> {_esc(document.client_name)}</p>",
        "<hr>",
    ]

    for index, scope in enumerate(document.scopes, start=1):
        if index > 1:
            parts.append("<hr>")
        parts.extend(_scope_section(index, scope, totals, currency, tax_label))

    parts.append("<hr>")
    parts.append("<h2>Financial Summary</h2>")
    parts.append(_summary_table(totals, currency, tax_label))

    if document.project_overview and document.project_overview.strip():
        parts.append("<hr>")
        parts.append("<h2>Project Overview</h2>")
        parts.append(f"<p>{_esc(document.project_overview)}</p>")

    if document.budget_notes and document.budget_notes.strip():
        parts.append("<h2>Budget Notes</h2>")
        parts.append(f"<p>{_esc(document.budget_notes)}</p>")

    parts.append(f"<p><em>{CLOSING_SENTENCE}</em></p>")
    return "\n".join(parts)
