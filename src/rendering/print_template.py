"""
Print template renderer for the PDF export.

Fills the fixed HTML shell in template_assets with a SOW document. All
placeholders are resolved in one regex pass, so a value is never scanned
for further tokens, and every free-text value is escaped with its braces
turned into entities so it cannot even look like a token.
"""

import base64
import html
import logging
import os
import re
from datetime import date
from typing import Dict, List, Optional

from src.common.errors import TemplateError
from src.documents.models import Scope, SOWDocument, Totals
from src.pricing.calculator import line_cost_with_tax, scope_hours, scope_total_with_tax
from src.pricing.formatting import format_currency, format_hours, format_percent

from .template_assets import SOW_PRINT_TEMPLATE

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")

CLIENT_LINE_SUFFIX = "Advisory | Services"

DEFAULT_PAGE_CSS = "@page { size: A4; margin: 10mm 10mm 20mm 10mm; }"


def escape_text(text) -> str:
    """HTML-escape free text and neutralize template braces."""
    escaped = html.escape("" if text is None else str(text), quote=True)
    return escaped.replace("{", "&#123;").replace("}", "&#125;")


def format_document_date(day: date) -> str:
    """Long US-style date, e.g. ``November 25, 2025``."""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def load_logo_data_uri(logo_path: Optional[str]) -> str:
    """Embed a PNG logo as a data URI; a missing logo yields an empty string."""
    if not logo_path:
        return ""
    if not os.path.exists(logo_path):
        logger.warning(f"Logo not found at {logo_path}, rendering without logo")
        return ""
    try:
        with open(logo_path, "rb") as f:
            encoded = base64.b64encode(f.read()).decode("ascii")
    except OSError as e:
        logger.error(f"Error reading logo {logo_path}: {e}")
        return ""
    return f"data:image/png;base64,{encoded}"


def substitute(template: str, values: Dict[str, str]) -> str:
    """
    Replace every ``{{TOKEN}}`` in one pass.

    Raises:
        TemplateError: If the template uses a token with no value
    """
    missing = sorted(set(TOKEN_PATTERN.findall(template)) - set(values))
    if missing:
        raise TemplateError(f"No value for template placeholders: {', '.join(missing)}")
    return TOKEN_PATTERN.sub(lambda match: values[match.group(1)], template)


def _list_block(heading: str, items: List[str]) -> str:
    entries = "".join(f"<li>{escape_text(item)}</li>" for item in items)
    return (
        "      <tr>\n"
        '        <td colspan="4" class="deliverables-block">\n'
        f"          <h4>{heading}:</h4>\n"
        f"          <ul>{entries}</ul>\n"
        "        </td>\n"
        "      </tr>\n"
    )


def _scope_rows(index: int, scope: Scope, totals: Totals) -> str:
    rows = [
        "      <tr>\n"
        f'        <td colspan="4" class="scope-section-header">Scope {index}: {escape_text(scope.title)}</td>\n'
        "      </tr>\n"
    ]
    if scope.description:
        rows.append(
            "      <tr>\n"
            f'        <td colspan="4" class="description-row">{escape_text(scope.description)}</td>\n'
            "      </tr>\n"
        )
    if scope.deliverables:
        rows.append(_list_block("Deliverables", scope.deliverables))
    for item in scope.line_items:
        rows.append(
            "      <tr>\n"
            f"        <td>{escape_text(item.task)}</td>\n"
            f"        <td>{escape_text(item.role_name)}</td>\n"
            f'        <td class="num">{format_hours(item.hours)}</td>\n'
            f'        <td class="num">{format_currency(line_cost_with_tax(item, totals.tax_rate))}</td>\n'
            "      </tr>\n"
        )
    if scope.assumptions:
        rows.append(_list_block("Assumptions", scope.assumptions))
    return "".join(rows)


def _summary_rows(document: SOWDocument, totals: Totals) -> str:
    rows = []
    for index, scope in enumerate(document.scopes, start=1):
        rows.append(
            "      <tr>\n"
            f"        <td>Scope {index}: {escape_text(scope.title)}</td>\n"
            f'        <td class="num">{format_hours(scope_hours(scope))}</td>\n'
            f'        <td class="num">{format_currency(scope_total_with_tax(scope, totals.tax_rate))}</td>\n'
            "      </tr>\n"
        )
    if totals.has_discount:
        discount_with_tax = totals.discount_amount + totals.discount_amount * totals.tax_rate
        rows.append(
            "      <tr>\n"
            f"        <td>Discount ({format_percent(totals.discount_percent)}%)</td>\n"
            '        <td class="num"></td>\n'
            f'        <td class="num">-{format_currency(discount_with_tax)}</td>\n'
            "      </tr>\n"
        )
    total_hours = format_hours(sum((scope_hours(scope) for scope in document.scopes), 0))
    rows.append(
        '      <tr class="grand-total">\n'
        "        <td>Grand Total</td>\n"
        f'        <td class="num">{total_hours}</td>\n'
        f'        <td class="num">{format_currency(totals.grand_total)}</td>\n'
        "      </tr>\n"
    )
    return "".join(rows)


def _project_overview_section(overview: str) -> str:
    if not overview or not overview.strip():
        return ""
    return (
        "  <h2>Project Overview</h2>\n"
        f'  <p class="project-description">{escape_text(overview)}</p>\n'
    )


def _budget_notes_section(budget_notes: str) -> str:
    if not budget_notes or not budget_notes.strip():
        return ""
    return (
        '  <div class="budget-notes">\n'
        "    <h2>Budget Notes</h2>\n"
        f"    <p>{escape_text(budget_notes)}</p>\n"
        "  </div>\n"
    )


def render_print_document(
    document: SOWDocument,
    totals: Totals,
    date_text: Optional[str] = None,
    today: Optional[date] = None,
    logo_data_uri: str = "",
    currency: str = "AUD",
    page_css: str = DEFAULT_PAGE_CSS,
    template: str = SOW_PRINT_TEMPLATE,
) -> str:
    """
    Render the complete print HTML for a SOW document.

    Args:
        document: Document to render (read only)
        totals: Totals computed for this document
        date_text: Date shown on the document; overrides ``today``
        today: Day used when no ``date_text`` is given (defaults to today)
        logo_data_uri: ``data:`` URI of the logo, or empty for none
        currency: Currency code shown beside the grand total
        page_css: ``@page`` rule for page size and margins
        template: HTML shell with ``{{TOKEN}}`` placeholders

    Returns:
        Standalone HTML document ready for PDF conversion
    """
    shown_date = date_text if date_text else format_document_date(today or date.today())
    title = document.project_title or "Statement of Work"
    logo_block = f'<img class="logo" src="{escape_text(logo_data_uri)}" alt="Logo">' if logo_data_uri else ""

    values = {
        "PAGE_CSS": page_css,
        "LOGO_BLOCK": logo_block,
        "PROJECT_TITLE": escape_text(title),
        "CLIENT_LINE": f"{escape_text(document.client_name)} | {CLIENT_LINE_SUFFIX}",
        "CLIENT_NAME": escape_text(document.client_name),
        "PROJECT_OVERVIEW_SECTION": _project_overview_section(document.project_overview),
        "DOCUMENT_DATE": escape_text(shown_date),
        "SCOPE_ROWS": "".join(
            _scope_rows(index, scope, totals) for index, scope in enumerate(document.scopes, start=1)
        ),
        "SUMMARY_ROWS": _summary_rows(document, totals),
        "GRAND_TOTAL": format_currency(totals.grand_total),
        "CURRENCY": escape_text(currency),
        "BUDGET_NOTES_SECTION": _budget_notes_section(document.budget_notes),
    }
    return substitute(template, values)
