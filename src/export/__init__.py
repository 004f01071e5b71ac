"""PDF and workbook export of SOW documents."""

from .converters import (
    LambdaPdfConverter,
    PageFormat,
    PdfConverter,
    WeasyPrintConverter,
    create_converter,
)
from .pdf_export import (
    ExportResult,
    ExportState,
    PdfExportJob,
    export_document_pdf,
    export_filename,
    set_max_concurrent_exports,
)
from .workbook import build_workbook, workbook_bytes

__all__ = [
    "PageFormat",
    "PdfConverter",
    "WeasyPrintConverter",
    "LambdaPdfConverter",
    "create_converter",
    "ExportResult",
    "ExportState",
    "PdfExportJob",
    "export_document_pdf",
    "export_filename",
    "set_max_concurrent_exports",
    "build_workbook",
    "workbook_bytes",
]
