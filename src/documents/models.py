"""Data models for Statement of Work documents."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from src.common.numbers import ZERO, clamp_percent


@dataclass
class LineItem:
    """A single task/role/hours/rate row within a scope.

    ``hours`` and ``rate`` are stored as given; readers coerce them, so a
    half-typed value never breaks a total.
    """

    id: str
    task: str = ""
    role_name: str = ""
    hours: Any = ZERO
    rate: Any = ZERO


@dataclass
class Scope:
    """A named grouping of work with its own pricing, deliverables and assumptions."""

    id: str
    title: str = ""
    description: str = ""
    line_items: List[LineItem] = field(default_factory=list)
    deliverables: List[str] = field(default_factory=list)
    assumptions: List[str] = field(default_factory=list)

    def find_line_item(self, item_id: str) -> Optional[LineItem]:
        for item in self.line_items:
            if item.id == item_id:
                return item
        return None


@dataclass
class SOWDocument:
    """Canonical in-memory Statement of Work.

    ``discount_percent`` is clamped into [0, 100] on every assignment,
    including construction.
    """

    client_name: str = ""
    project_title: str = ""
    scopes: List[Scope] = field(default_factory=list)
    project_overview: str = ""
    budget_notes: str = ""
    discount_percent: Decimal = ZERO

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "discount_percent":
            value = clamp_percent(value)
        super().__setattr__(name, value)

    def find_scope(self, scope_id: str) -> Optional[Scope]:
        for scope in self.scopes:
            if scope.id == scope_id:
                return scope
        return None

    @property
    def is_empty(self) -> bool:
        return not self.scopes


@dataclass(frozen=True)
class Totals:
    """Derived pricing summary of a document. Computed on demand, never stored."""

    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    after_discount: Decimal
    tax: Decimal
    grand_total: Decimal
    tax_rate: Decimal

    @property
    def has_discount(self) -> bool:
        return self.discount_percent > 0
