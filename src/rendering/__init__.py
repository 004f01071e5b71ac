"""Renderers projecting a SOW document onto the editor and the print template."""

from .markup import CLOSING_SENTENCE, render_markup
from .print_template import load_logo_data_uri, render_print_document

__all__ = [
    "CLOSING_SENTENCE",
    "render_markup",
    "render_print_document",
    "load_logo_data_uri",
]
