"""SOW document model and the validation boundary for assistant payloads."""

from .models import LineItem, Scope, SOWDocument, Totals
from .schemas import SowPayload, parse_sow_payload

__all__ = [
    "LineItem",
    "Scope",
    "SOWDocument",
    "Totals",
    "SowPayload",
    "parse_sow_payload",
]
