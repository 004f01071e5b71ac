#!/usr/bin/env python3
"""Command line interface for the SOW document engine."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from src.catalog import load_rate_catalog
from src.common.config import get_tax_rate, load_config
from src.common.errors import SowEngineError
from src.documents import SOWDocument, parse_sow_payload
from src.export import (
    PageFormat,
    create_converter,
    export_document_pdf,
    export_filename,
    set_max_concurrent_exports,
    workbook_bytes,
)
from src.integrations import KnowledgeBaseClient
from src.pricing import document_totals, format_currency, format_percent
from src.rendering import load_logo_data_uri, render_markup, render_print_document

logger = logging.getLogger(__name__)


def _read_document(payload) -> SOWDocument:
    document = parse_sow_payload(payload.read())
    if document.is_empty:
        logger.warning("Payload contains no scopes")
    return document


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Wrote {output}")
    else:
        click.echo(text)


def _pricing(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get("pricing") or {}


@click.group()
@click.option("--config", "config_path", help="YAML configuration file")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str]):
    """Statement of Work pricing, rendering and export."""
    logging.basicConfig(level=logging.INFO)
    ctx.ensure_object(dict)
    config = load_config(config_path)
    set_max_concurrent_exports(config["export"]["max_concurrent"])
    ctx.obj["config"] = config


@cli.command()
@click.pass_context
def roles(ctx: click.Context):
    """List the roles and hourly rates of the rate card."""
    catalog = load_rate_catalog(ctx.obj["config"]["catalog"].get("path"))
    if not catalog.available:
        click.echo(f"⚠️  {catalog.warning}")
        return

    for entry in catalog:
        click.echo(f"{entry.role_name}\t{format_currency(entry.base_hourly_rate)}")
    click.echo(f"\n{len(catalog)} roles")


@cli.command()
@click.argument("payload", type=click.File("r"))
@click.pass_context
def totals(ctx: click.Context, payload):
    """Show the financial summary of a SOW payload."""
    config = ctx.obj["config"]
    document = _read_document(payload)
    result = document_totals(document, get_tax_rate(config))
    tax_label = _pricing(config).get("tax_label", "GST")
    currency = _pricing(config).get("currency", "AUD")

    click.echo(f"Subtotal: {format_currency(result.subtotal)}")
    if result.has_discount:
        click.echo(f"Discount ({format_percent(result.discount_percent)}%): -{format_currency(result.discount_amount)}")
        click.echo(f"After Discount: {format_currency(result.after_discount)}")
    click.echo(f"{tax_label} ({format_percent(result.tax_rate * 100)}%): +{format_currency(result.tax)}")
    click.echo(f"Grand Total: {format_currency(result.grand_total)} {currency}")


@cli.command()
@click.argument("payload", type=click.File("r"))
@click.option("--output", "-o", help="Write to this file instead of stdout")
@click.pass_context
def markup(ctx: click.Context, payload, output: Optional[str]):
    """Render a SOW payload as editor markup."""
    config = ctx.obj["config"]
    document = _read_document(payload)
    text = render_markup(
        document,
        document_totals(document, get_tax_rate(config)),
        currency=_pricing(config).get("currency", "AUD"),
        tax_label=_pricing(config).get("tax_label", "GST"),
    )
    _write_output(text, output)


@cli.command("print-html")
@click.argument("payload", type=click.File("r"))
@click.option("--output", "-o", help="Write to this file instead of stdout")
@click.option("--date", "date_text", help="Date shown on the document")
@click.pass_context
def print_html(ctx: click.Context, payload, output: Optional[str], date_text: Optional[str]):
    """Render a SOW payload through the print template."""
    config = ctx.obj["config"]
    document = _read_document(payload)
    html = render_print_document(
        document,
        document_totals(document, get_tax_rate(config)),
        date_text=date_text,
        logo_data_uri=load_logo_data_uri(config["export"].get("logo_path")),
        currency=_pricing(config).get("currency", "AUD"),
        page_css=PageFormat.from_config(config).page_css(),
    )
    _write_output(html, output)


@cli.command("export-pdf")
@click.argument("payload", type=click.File("r"))
@click.option("--output-dir", default=".", show_default=True, help="Directory for the PDF")
@click.option("--date", "date_text", help="Date shown on the document")
@click.pass_context
def export_pdf(ctx: click.Context, payload, output_dir: str, date_text: Optional[str]):
    """Export a SOW payload to PDF."""
    config = ctx.obj["config"]
    document = _read_document(payload)

    result = export_document_pdf(
        document,
        lambda: create_converter(config),
        config=config,
        tax_rate=get_tax_rate(config),
        date_text=date_text,
        logo_data_uri=load_logo_data_uri(config["export"].get("logo_path")),
    )
    if not result.ok:
        click.echo(f"\n❌ {result.error}: {result.detail}")
        sys.exit(1)

    path = Path(output_dir) / result.filename
    path.write_bytes(result.pdf)
    click.echo(f"✅ Wrote {path}")


@cli.command("export-xlsx")
@click.argument("payload", type=click.File("r"))
@click.option("--output-dir", default=".", show_default=True, help="Directory for the workbook")
@click.pass_context
def export_xlsx(ctx: click.Context, payload, output_dir: str):
    """Export a SOW payload to an Excel workbook."""
    config = ctx.obj["config"]
    document = _read_document(payload)
    data = workbook_bytes(
        document,
        document_totals(document, get_tax_rate(config)),
        currency=_pricing(config).get("currency", "AUD"),
        tax_label=_pricing(config).get("tax_label", "GST"),
    )
    path = Path(output_dir) / export_filename(document.project_title, extension="xlsx")
    path.write_bytes(data)
    click.echo(f"✅ Wrote {path}")


@cli.command()
@click.argument("query")
@click.option("--workspace", help="Workspace slug (configured default if omitted)")
@click.pass_context
def consult(ctx: click.Context, query: str, workspace: Optional[str]):
    """Ask the knowledge base a question."""
    client = KnowledgeBaseClient.from_config(ctx.obj["config"])
    try:
        answer = client.consult(query, workspace)
    except (SowEngineError, ValueError) as e:
        click.echo(f"\n❌ {getattr(e, 'user_message', 'Invalid query')}: {e}")
        sys.exit(1)

    click.echo(answer.text)
    for source in answer.sources:
        click.echo(f"  • {source.get('title') or source.get('url') or 'source'}")


@cli.command()
@click.argument("brief", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def ingest(ctx: click.Context, brief: str):
    """Upload a client brief to the knowledge base."""
    client = KnowledgeBaseClient.from_config(ctx.obj["config"])
    path = Path(brief)
    try:
        document = client.ingest_brief(path.read_bytes(), path.name)
    except SowEngineError as e:
        click.echo(f"\n❌ {e.user_message}: {e}")
        sys.exit(1)

    click.echo(f"✅ Uploaded {document.file_name} ({document.file_size} bytes)")
    if not document.pinned:
        click.echo("⚠️  Document was not pinned to the workspace; queries may not see it yet")


if __name__ == "__main__":
    cli()
