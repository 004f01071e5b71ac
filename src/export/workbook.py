"""Excel export: a Summary sheet plus one detail sheet per scope."""

import io
import logging
from typing import Any, List

from openpyxl import Workbook
from openpyxl.styles import Font

from src.common.numbers import safe_number
from src.documents.models import SOWDocument, Totals
from src.pricing.calculator import line_cost, scope_hours, scope_subtotal, scope_total_with_tax
from src.pricing.formatting import format_percent, round_currency

logger = logging.getLogger(__name__)

# Excel rejects sheet titles longer than 31 characters
MAX_SHEET_TITLE = 31

BOLD = Font(bold=True)


def _money(value: Any) -> float:
    return float(round_currency(value))


def _sheet_title(index: int) -> str:
    return f"Scope {index}"[:MAX_SHEET_TITLE]


def _append(sheet, values: List[Any]) -> None:
    """Append a row, keeping text cells as text even when they start with ``=``."""
    sheet.append(values)
    if not values:
        return
    for column in range(1, len(values) + 1):
        cell = sheet.cell(row=sheet.max_row, column=column)
        if isinstance(cell.value, str) and cell.data_type == "f":
            cell.data_type = "s"


def build_workbook(
    document: SOWDocument,
    totals: Totals,
    currency: str = "AUD",
    tax_label: str = "GST",
) -> Workbook:
    """
    Build the SOW workbook.

    Amounts are written as numbers rounded to cents so spreadsheets can sum them.
    """
    workbook = Workbook()
    summary = workbook.active
    summary.title = "Summary"

    _append(summary, ["Project", document.project_title])
    _append(summary, ["Client", document.client_name])
    _append(summary, [])
    _append(summary, ["Financial Summary"])
    summary.cell(row=summary.max_row, column=1).font = BOLD
    _append(summary, ["Subtotal", _money(totals.subtotal)])
    if totals.has_discount:
        _append(summary, [f"Discount ({format_percent(totals.discount_percent)}%)", -_money(totals.discount_amount)])
        _append(summary, ["After Discount", _money(totals.after_discount)])
    _append(summary, [f"{tax_label} ({format_percent(totals.tax_rate * 100)}%)", _money(totals.tax)])
    _append(summary, [f"TOTAL ({currency})", _money(totals.grand_total)])
    summary.cell(row=summary.max_row, column=1).font = BOLD
    _append(summary, [])
    _append(summary, ["Scope Breakdown", "Hours", f"Total + {tax_label} ({currency})"])
    summary.cell(row=summary.max_row, column=1).font = BOLD

    for index, scope in enumerate(document.scopes, start=1):
        _append(
            summary,
            [
                f"Scope {index}: {scope.title}",
                float(scope_hours(scope)),
                _money(scope_total_with_tax(scope, totals.tax_rate)),
            ]
        )

    for index, scope in enumerate(document.scopes, start=1):
        sheet = workbook.create_sheet(_sheet_title(index))
        _append(sheet, [f"Scope {index}: {scope.title}"])
        sheet.cell(row=1, column=1).font = BOLD
        _append(sheet, [scope.description])
        _append(sheet, [])

        if scope.deliverables:
            _append(sheet, ["Deliverables:"])
            for item in scope.deliverables:
                _append(sheet, [f"  • {item}"])
            _append(sheet, [])

        _append(
            sheet,
            [
                "Task/Description",
                "Role",
                "Hours",
                f"Rate ({currency})",
                f"Cost ({currency})",
                f"{tax_label} ({currency})",
                f"Total + {tax_label} ({currency})",
            ]
        )
        for cell in sheet[sheet.max_row]:
            cell.font = BOLD

        for item in scope.line_items:
            cost = line_cost(item)
            tax = cost * totals.tax_rate
            _append(
                sheet,
                [
                    item.task or "",
                    item.role_name or "",
                    float(safe_number(item.hours)),
                    _money(safe_number(item.rate)),
                    _money(cost),
                    _money(tax),
                    _money(cost + tax),
                ]
            )

        subtotal = scope_subtotal(scope)
        _append(sheet, [])
        _append(
            sheet,
            ["", "", "", "Scope Total:", _money(subtotal), _money(subtotal * totals.tax_rate),
             _money(scope_total_with_tax(scope, totals.tax_rate))],
        )

        if scope.assumptions:
            _append(sheet, [])
            _append(sheet, ["Assumptions:"])
            for item in scope.assumptions:
                _append(sheet, [f"  • {item}"])

    logger.info(f"Built workbook with {len(document.scopes)} scope sheets")
    return workbook


def workbook_bytes(document: SOWDocument, totals: Totals, **kwargs: Any) -> bytes:
    """Serialize the SOW workbook to .xlsx bytes."""
    buffer = io.BytesIO()
    build_workbook(document, totals, **kwargs).save(buffer)
    return buffer.getvalue()
