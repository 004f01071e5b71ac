"""
Write boundary for an editing surface.

A DocumentEditor owns one SOWDocument on behalf of whichever surface is
editing it. Every write goes through here so numbers are coerced and the
discount is clamped at the moment of writing. Unknown scope or line item
ids raise KeyError: those come from the surface, not from the user.
"""

import logging
from typing import Any, Optional

from src.catalog.rate_catalog import RateCatalog
from src.common.numbers import ZERO, clamp_percent, safe_number
from src.pricing.calculator import GST_RATE, document_totals

from .models import LineItem, Scope, SOWDocument, Totals

logger = logging.getLogger(__name__)

EDITABLE_LINE_FIELDS = ("task", "role_name", "hours", "rate")


class DocumentEditor:
    """Applies user edits to a SOW document."""

    def __init__(
        self,
        document: Optional[SOWDocument] = None,
        catalog: Optional[RateCatalog] = None,
        tax_rate: Any = GST_RATE,
    ):
        self.document = document if document is not None else SOWDocument()
        self.catalog = catalog if catalog is not None else RateCatalog()
        self.tax_rate = tax_rate

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def _scope(self, scope_id: str) -> Scope:
        scope = self.document.find_scope(scope_id)
        if scope is None:
            raise KeyError(f"Unknown scope: {scope_id}")
        return scope

    def _line_item(self, scope_id: str, item_id: str) -> LineItem:
        item = self._scope(scope_id).find_line_item(item_id)
        if item is None:
            raise KeyError(f"Unknown line item {item_id} in scope {scope_id}")
        return item

    def _next_id(self, prefix: str, taken: set) -> str:
        n = len(taken) + 1
        while f"{prefix}-{n}" in taken:
            n += 1
        return f"{prefix}-{n}"

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def set_discount(self, value: Any) -> None:
        """Set the discount percentage; out-of-range input is clamped, not rejected."""
        clamped = clamp_percent(value)
        logger.debug(f"Discount {value!r} stored as {clamped}")
        self.document.discount_percent = clamped

    def totals(self) -> Totals:
        return document_totals(self.document, self.tax_rate)

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def add_scope(self, title: str = "", description: str = "") -> Scope:
        taken = {scope.id for scope in self.document.scopes}
        scope = Scope(id=self._next_id("scope", taken), title=title, description=description)
        self.document.scopes.append(scope)
        return scope

    def remove_scope(self, scope_id: str) -> Scope:
        """Remove a scope together with all of its line items."""
        scope = self._scope(scope_id)
        self.document.scopes = [s for s in self.document.scopes if s.id != scope_id]
        return scope

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_line_item(
        self,
        scope_id: str,
        task: str = "",
        role_name: str = "",
        hours: Any = ZERO,
        rate: Any = ZERO,
    ) -> LineItem:
        scope = self._scope(scope_id)
        taken = {item.id for s in self.document.scopes for item in s.line_items}
        item = LineItem(
            id=self._next_id("row", taken),
            task=task or "",
            role_name=role_name or "",
            hours=safe_number(hours),
            rate=safe_number(rate),
        )
        scope.line_items.append(item)
        return item

    def update_line_item(self, scope_id: str, item_id: str, **fields: Any) -> LineItem:
        item = self._line_item(scope_id, item_id)
        for name, value in fields.items():
            if name not in EDITABLE_LINE_FIELDS:
                raise KeyError(f"Line item field not editable: {name}")
            if name in ("hours", "rate"):
                value = safe_number(value)
            else:
                value = "" if value is None else str(value)
            setattr(item, name, value)
        return item

    def remove_line_item(self, scope_id: str, item_id: str) -> LineItem:
        scope = self._scope(scope_id)
        item = self._line_item(scope_id, item_id)
        scope.line_items = [i for i in scope.line_items if i.id != item_id]
        return item

    def move_line_item(self, scope_id: str, from_index: int, to_index: int) -> None:
        """Reorder a line item within its scope (drag and drop)."""
        items = self._scope(scope_id).line_items
        if not 0 <= from_index < len(items):
            raise IndexError(f"No line item at position {from_index}")
        to_index = max(0, min(to_index, len(items) - 1))
        if from_index == to_index:
            return
        item = items.pop(from_index)
        items.insert(to_index, item)

    def select_role(self, scope_id: str, item_id: str, role_name: str) -> LineItem:
        """Set a row's role and, when the rate card knows the role, its rate."""
        item = self._line_item(scope_id, item_id)
        item.role_name = role_name or ""
        rate = self.catalog.lookup_rate(item.role_name)
        if rate is not None:
            item.rate = rate
        return item

    # ------------------------------------------------------------------
    # Deliverables and assumptions
    # ------------------------------------------------------------------

    def add_deliverable(self, scope_id: str, text: str) -> None:
        if text and text.strip():
            self._scope(scope_id).deliverables.append(text.strip())

    def remove_deliverable(self, scope_id: str, index: int) -> str:
        return self._scope(scope_id).deliverables.pop(index)

    def add_assumption(self, scope_id: str, text: str) -> None:
        if text and text.strip():
            self._scope(scope_id).assumptions.append(text.strip())

    def remove_assumption(self, scope_id: str, index: int) -> str:
        return self._scope(scope_id).assumptions.pop(index)
