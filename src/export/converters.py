"""
HTML to PDF converters.

A converter is a heavyweight resource: ``open()`` acquires it, ``close()``
releases it, and ``convert()`` only works in between. Use it as a context
manager so it is released on every exit path.

Two implementations:
    WeasyPrintConverter - renders locally with WeasyPrint
    LambdaPdfConverter  - invokes the document-service Lambda, which drives a
                          headless browser and returns the PDF base64-encoded
"""

import base64
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.common.call_log import log_call
from src.common.errors import PdfConversionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageFormat:
    """Page setup handed to the converter."""

    page_size: str = "A4"
    margins: Dict[str, str] = field(
        default_factory=lambda: {"top": "10mm", "right": "10mm", "bottom": "20mm", "left": "10mm"}
    )
    print_background: bool = True
    display_header_footer: bool = False

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PageFormat":
        export = (config or {}).get("export") or {}
        defaults = cls()
        return cls(
            page_size=str(export.get("page_size") or defaults.page_size),
            margins={**defaults.margins, **(export.get("margins") or {})},
            print_background=bool(export.get("print_background", True)),
            display_header_footer=bool(export.get("display_header_footer", False)),
        )

    def page_css(self) -> str:
        m = self.margins
        return (
            f"@page {{ size: {self.page_size}; "
            f"margin: {m['top']} {m['right']} {m['bottom']} {m['left']}; }}"
        )


class PdfConverter(ABC):
    """Abstract base class for HTML to PDF converters."""

    collaborator_name = "pdf_converter"

    def __init__(self):
        self.is_open = False

    def open(self) -> "PdfConverter":
        self.is_open = True
        return self

    def close(self) -> None:
        self.is_open = False

    def __enter__(self) -> "PdfConverter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_open(self) -> None:
        if not self.is_open:
            raise PdfConversionError(
                "Converter used before open()", collaborator=self.collaborator_name
            )

    @abstractmethod
    def convert(self, html: str, page_format: PageFormat) -> bytes:
        """
        Convert a complete HTML document to PDF.

        Args:
            html: Standalone HTML document
            page_format: Page size, margins and background settings

        Returns:
            PDF bytes

        Raises:
            PdfConversionError: If conversion fails
        """
        pass


def _load_weasyprint():
    # Imported on first use: WeasyPrint loads Pango at import time
    from weasyprint import CSS, HTML
    from weasyprint.text.fonts import FontConfiguration

    return HTML, CSS, FontConfiguration


class WeasyPrintConverter(PdfConverter):
    """Renders PDFs in-process with WeasyPrint."""

    collaborator_name = "weasyprint"

    def __init__(self, base_url: Optional[str] = None):
        super().__init__()
        self.base_url = base_url
        self._html_cls = None
        self._css_cls = None
        self._font_config = None

    def open(self) -> "WeasyPrintConverter":
        try:
            self._html_cls, self._css_cls, font_config_cls = _load_weasyprint()
            self._font_config = font_config_cls()
        except (ImportError, OSError) as e:
            raise PdfConversionError(
                f"WeasyPrint is not usable: {e}", collaborator=self.collaborator_name, original_error=e
            ) from e
        return super().open()

    def close(self) -> None:
        self._font_config = None
        self._html_cls = None
        self._css_cls = None
        super().close()

    @log_call
    def convert(self, html: str, page_format: PageFormat) -> bytes:
        self._require_open()
        try:
            stylesheet = self._css_cls(string=page_format.page_css(), font_config=self._font_config)
            pdf_bytes = self._html_cls(string=html, base_url=self.base_url).write_pdf(
                stylesheets=[stylesheet], font_config=self._font_config
            )
        except Exception as e:
            raise PdfConversionError(
                f"WeasyPrint rendering failed: {e}", collaborator=self.collaborator_name, original_error=e
            ) from e
        if not pdf_bytes:
            raise PdfConversionError("WeasyPrint returned an empty PDF", collaborator=self.collaborator_name)
        return pdf_bytes


class LambdaPdfConverter(PdfConverter):
    """Converts HTML through the headless-browser document-service Lambda."""

    collaborator_name = "pdf_lambda"

    def __init__(self, function_arn: str, lambda_client=None):
        """
        Args:
            function_arn: ARN of the document-service Lambda
            lambda_client: Optional boto3 Lambda client (for testing)
        """
        super().__init__()
        if not function_arn:
            raise PdfConversionError("PDF Lambda ARN is not configured", collaborator=self.collaborator_name)
        self.function_arn = function_arn
        self._injected_client = lambda_client
        self.client = None

    def open(self) -> "LambdaPdfConverter":
        self.client = self._injected_client or boto3.client("lambda")
        return super().open()

    def close(self) -> None:
        if self.client is not None and self._injected_client is None and hasattr(self.client, "close"):
            self.client.close()
        self.client = None
        super().close()

    def _payload(self, html: str, page_format: PageFormat) -> Dict[str, Any]:
        return {
            "docType": "html-to-pdf",
            "html": html,
            "pdfOptions": {
                "format": page_format.page_size,
                "margin": dict(page_format.margins),
                "printBackground": page_format.print_background,
                "displayHeaderFooter": page_format.display_header_footer,
            },
        }

    @log_call
    def convert(self, html: str, page_format: PageFormat) -> bytes:
        self._require_open()
        try:
            response = self.client.invoke(
                FunctionName=self.function_arn,
                InvocationType="RequestResponse",
                Payload=json.dumps(self._payload(html, page_format)),
            )
            raw_response = response["Payload"].read()
        except (ClientError, BotoCoreError) as e:
            raise PdfConversionError(
                f"PDF Lambda invocation failed: {e}", collaborator=self.collaborator_name, original_error=e
            ) from e

        logger.info(f"PDF Lambda status: {response.get('StatusCode')}, response size: {len(raw_response)} bytes")

        try:
            payload = json.loads(raw_response)
        except json.JSONDecodeError as e:
            logger.error(f"Raw PDF Lambda response (first 500 chars): {raw_response[:500]}")
            raise PdfConversionError(
                f"Invalid JSON response from PDF Lambda: {e}", collaborator=self.collaborator_name
            ) from e

        # HTTP-style envelope: {"statusCode": 200, "body": "{...}"}
        if isinstance(payload, dict) and "statusCode" in payload:
            if payload.get("statusCode") != 200:
                raise PdfConversionError(
                    f"PDF Lambda returned status {payload.get('statusCode')}: {payload.get('body')}",
                    collaborator=self.collaborator_name,
                )
            try:
                payload = json.loads(payload.get("body") or "{}")
            except json.JSONDecodeError as e:
                raise PdfConversionError(
                    f"Invalid body JSON in PDF Lambda response: {e}", collaborator=self.collaborator_name
                ) from e

        if not isinstance(payload, dict) or not payload.get("success"):
            error = "Unknown error generating PDF"
            if isinstance(payload, dict):
                error = payload.get("error") or payload.get("errorMessage") or error
            raise PdfConversionError(error, collaborator=self.collaborator_name)

        pdf_base64 = payload.get("pdf")
        if not pdf_base64:
            raise PdfConversionError("PDF Lambda response has no PDF content", collaborator=self.collaborator_name)
        return base64.b64decode(pdf_base64)


def create_converter(config: Dict[str, Any]) -> PdfConverter:
    """Build the converter named by ``export.converter`` in the config."""
    export = (config or {}).get("export") or {}
    name = str(export.get("converter") or "weasyprint").lower()
    if name == "weasyprint":
        return WeasyPrintConverter()
    if name == "lambda":
        return LambdaPdfConverter(export.get("lambda_arn"))
    raise PdfConversionError(
        f"Unknown PDF converter: {name}. Supported converters: weasyprint, lambda",
        collaborator="pdf_converter",
    )
