"""Insertion of a rendered SOW into a rich-text editor."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from src.documents.models import SOWDocument
from src.pricing.calculator import GST_RATE, document_totals
from src.rendering.markup import render_markup

logger = logging.getLogger(__name__)


class EditorSurface(ABC):
    """A rich-text editor that accepts rendered markup."""

    @abstractmethod
    def replace_content(self, markup: str) -> None:
        """Replace the entire editor content with ``markup``."""
        pass


def insert_sow(
    editor: EditorSurface,
    document: SOWDocument,
    tax_rate: Any = GST_RATE,
    currency: str = "AUD",
    tax_label: str = "GST",
) -> str:
    """
    Render a SOW and replace the editor content with it.

    The replace is destructive: anything the editor held is discarded.

    Args:
        editor: Target editor
        document: Document to insert
        tax_rate: Tax rate used for totals
        currency: Currency code shown in totals
        tax_label: Tax name shown in totals

    Returns:
        The markup that was inserted

    Raises:
        ValueError: If the document has no scopes
    """
    if document.is_empty:
        raise ValueError("Refusing to insert a SOW with no scopes")

    markup = render_markup(document, document_totals(document, tax_rate), currency=currency, tax_label=tax_label)
    logger.info(f"Replacing editor content with SOW '{document.project_title}' ({len(document.scopes)} scopes)")
    editor.replace_content(markup)
    return markup
