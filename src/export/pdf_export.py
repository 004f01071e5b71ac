"""
PDF export of SOW documents.

An export request moves idle -> generating -> succeeded | failed. The
converter is acquired per request and released on every path; a bounded
semaphore caps how many converters are alive at once. Failures never touch
the document and come back as an ExportResult carrying a generic message
plus the diagnostic detail.
"""

import logging
import math
import re
import threading
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Optional

from src.common.errors import PdfConversionError, SowEngineError
from src.documents.models import SOWDocument
from src.pricing.calculator import GST_RATE, document_totals
from src.rendering.print_template import render_print_document

from .converters import PageFormat, PdfConverter

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_EXPORTS = 2

_export_slots = threading.BoundedSemaphore(DEFAULT_MAX_CONCURRENT_EXPORTS)


def set_max_concurrent_exports(limit: int) -> None:
    """Resize the process-wide converter limit; call once at startup."""
    global _export_slots
    _export_slots = threading.BoundedSemaphore(max(1, int(limit)))


class ExportState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ExportResult:
    """Outcome of one export request."""

    state: ExportState
    filename: str
    pdf: Optional[bytes] = None
    error: Optional[str] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state == ExportState.SUCCEEDED


def export_filename(project_title: str, day: Optional[date] = None, extension: str = "pdf") -> str:
    """``"Website Rebuild"`` -> ``Website-Rebuild-2025-11-25.pdf``."""
    title = re.sub(r"\s+", "-", (project_title or "").strip()) or "Statement-of-Work"
    title = re.sub(r"[^\w.\-]", "", title) or "Statement-of-Work"
    return f"{title}-{(day or date.today()).isoformat()}.{extension}"


class PdfExportJob:
    """A single PDF export request."""

    def __init__(
        self,
        converter_factory: Callable[[], PdfConverter],
        page_format: Optional[PageFormat] = None,
        slots: Optional[threading.BoundedSemaphore] = None,
        slot_timeout: Optional[float] = None,
    ):
        """
        Args:
            converter_factory: Returns a fresh, unopened converter
            page_format: Page setup for the conversion
            slots: Semaphore bounding concurrent conversions (module default if omitted)
            slot_timeout: Seconds to wait for a free slot; None waits indefinitely
        """
        self.converter_factory = converter_factory
        self.page_format = page_format or PageFormat()
        self.slots = slots if slots is not None else _export_slots
        self.slot_timeout = slot_timeout
        self.state = ExportState.IDLE

    def _fail(self, filename: str, error: Exception) -> ExportResult:
        self.state = ExportState.FAILED
        message = getattr(error, "user_message", PdfConversionError.user_message)
        logger.error(f"PDF export failed for {filename}: {error}")
        return ExportResult(state=self.state, filename=filename, error=message, detail=str(error))

    def run(self, html: str, filename: str) -> ExportResult:
        """Convert ``html`` to PDF; never raises for collaborator failures."""
        if self.state != ExportState.IDLE:
            raise RuntimeError(f"Export job already {self.state.value}")

        self.state = ExportState.GENERATING
        if not self.slots.acquire(timeout=self.slot_timeout):
            return self._fail(filename, PdfConversionError("No PDF converter slot available"))

        converter = None
        try:
            converter = self.converter_factory()
            converter.open()
            pdf_bytes = converter.convert(html, self.page_format)
        except SowEngineError as e:
            return self._fail(filename, e)
        except Exception as e:
            return self._fail(filename, PdfConversionError(f"Unexpected converter error: {e}", original_error=e))
        finally:
            if converter is not None:
                try:
                    converter.close()
                except Exception as e:
                    logger.warning(f"Error releasing PDF converter: {e}")
            self.slots.release()

        self.state = ExportState.SUCCEEDED
        logger.info(f"Generated {filename} ({len(pdf_bytes)} bytes)")
        return ExportResult(state=self.state, filename=filename, pdf=pdf_bytes)


def _request_budget(config: Dict[str, Any]) -> Optional[float]:
    """Seconds an export may wait for a converter slot, from ``export.request_budget_seconds``."""
    raw = ((config or {}).get("export") or {}).get("request_budget_seconds")
    try:
        budget = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    return budget if math.isfinite(budget) and budget > 0 else None


def export_document_pdf(
    document: SOWDocument,
    converter_factory: Callable[[], PdfConverter],
    config: Optional[Dict[str, Any]] = None,
    tax_rate: Any = GST_RATE,
    date_text: Optional[str] = None,
    logo_data_uri: str = "",
    today: Optional[date] = None,
    slot_timeout: Optional[float] = None,
) -> ExportResult:
    """
    Render a document through the print template and convert it to PDF.

    Args:
        document: Document to export (read only)
        converter_factory: Returns a fresh, unopened converter
        config: Engine configuration (page format, currency, request budget)
        tax_rate: Tax rate used for totals
        date_text: Date shown on the document
        logo_data_uri: Embedded logo, or empty
        today: Day used for the filename and default date
        slot_timeout: Seconds to wait for a converter slot; defaults to the
            configured request budget

    Returns:
        ExportResult
    """
    config = config or {}
    day = today or date.today()
    filename = export_filename(document.project_title, day)
    page_format = PageFormat.from_config(config)

    totals = document_totals(document, tax_rate)
    currency = ((config.get("pricing") or {}).get("currency")) or "AUD"
    html = render_print_document(
        document,
        totals,
        date_text=date_text,
        today=day,
        logo_data_uri=logo_data_uri,
        currency=currency,
        page_css=page_format.page_css(),
    )

    if slot_timeout is None:
        slot_timeout = _request_budget(config)
    job = PdfExportJob(converter_factory, page_format=page_format, slot_timeout=slot_timeout)
    return job.run(html, filename)
