"""Click CLI — tax resolution, totals and the document ledger."""

from __future__ import annotations

import functools
import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from faktura.billing.totals import totals as compute_totals
from faktura.config import DEFAULT_LANGUAGE, LOG_LEVEL
from faktura.documents.builder import (
    DocumentValidationError,
    build_document,
    next_document_number,
)
from faktura.documents.validators import validate_document_for_pdf
from faktura.formatting import format_currency, format_date, format_rate
from faktura.logging_config import configure_logging
from faktura.models.countries import country_name, list_countries
from faktura.models.document import Client, CompanyProfile, DocLine, Document
from faktura.models.enums import BusinessType, DocType, Language, TaxScheme
from faktura.models.tax import TaxContext
from faktura.reporting.reports import filter_documents, print_summary, print_vat_report
from faktura.storage.local_json import LocalJsonStorage, write_csv
from faktura.tax.resolver import (
    build_legal_notes,
    determine_region,
    get_rates_for_country,
    resolve_scheme,
    summarize_tax_badge,
)
from faktura.tax.tables import TAX_RULES, get_message
from faktura.tax.vat_id import get_vat_country_code, is_likely_valid_vat, normalize_vat_id

console = Console()

SCHEME_STYLES = {
    TaxScheme.STANDARD: "magenta",
    TaxScheme.REVERSE_CHARGE: "blue",
    TaxScheme.EXEMPT: "green",
}


def _get_storage() -> LocalJsonStorage:
    return LocalJsonStorage()


def _parse_line(text: str) -> DocLine:
    """QTY:PRICE:RATE[:DISCOUNT] -> DocLine."""
    parts = text.split(":")
    if len(parts) not in (3, 4):
        raise click.BadParameter(f"{text!r} is not QTY:PRICE:RATE[:DISCOUNT]")
    try:
        values = [Decimal(p.strip().replace(",", ".")) for p in parts]
    except InvalidOperation:
        raise click.BadParameter(f"{text!r} contains a non-numeric value")
    return DocLine(
        qty=values[0],
        unit_price=values[1],
        tax_rate=values[2],
        discount_pct=values[3] if len(values) == 4 else None,
    )


def context_options(func):
    """Shared options that describe a transaction (TaxContext)."""

    @click.option("--seller", "seller_country", default="AT", show_default=True, help="Seller country code")
    @click.option("--buyer", "buyer_country", default=None, help="Buyer country code (default: seller)")
    @click.option("--type", "business_type", type=click.Choice(["B2B", "B2C"], case_sensitive=False),
                  default="B2C", show_default=True)
    @click.option("--buyer-vat", default=None, help="Buyer VAT ID")
    @click.option("--seller-vat", default=None, help="Seller VAT ID")
    @click.option("--small-business", is_flag=True, help="Seller uses the small business exemption")
    @click.option("--date", "invoice_date", default="", help="Invoice date (YYYY-MM-DD)")
    @click.option("--lang", "language", type=click.Choice(["de", "en"]), default=DEFAULT_LANGUAGE,
                  show_default=True)
    @functools.wraps(func)
    def wrapper(seller_country, buyer_country, business_type, buyer_vat, seller_vat,
                small_business, invoice_date, language, **kwargs):
        try:
            ctx = TaxContext(
                seller_country=seller_country,
                buyer_country=buyer_country or seller_country,
                business_type=BusinessType(business_type.upper()),
                seller_vat_id=seller_vat,
                buyer_vat_id=buyer_vat,
                small_business_flag=small_business,
                invoice_date_iso=invoice_date,
                language=Language(language),
            )
        except ValidationError as e:
            console.print(f"[red]Invalid transaction: {escape(str(e))}[/red]")
            raise SystemExit(1)
        return func(ctx=ctx, **kwargs)

    return wrapper


def _print_totals(lines: list[DocLine], scheme: TaxScheme, currency: str, language: Language) -> None:
    result = compute_totals(lines, scheme)
    table = Table(title=f"Totals ({scheme.value})")
    table.add_column("", width=22)
    table.add_column("Amount", justify="right", width=16)
    table.add_row("Net", format_currency(result.subtotal_net, currency, language))
    for item in result.tax_breakdown:
        table.add_row(
            f"VAT {format_rate(item.rate)}% on {format_currency(item.base, currency, language)}",
            format_currency(item.tax, currency, language),
        )
    table.add_row("VAT total", format_currency(result.tax_total, currency, language))
    table.add_section()
    table.add_row("[bold]Gross[/bold]", f"[bold]{format_currency(result.total_gross, currency, language)}[/bold]")
    console.print(table)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log tax decisions to stderr")
def cli(verbose: bool) -> None:
    """Faktura — invoices and quotes with EU VAT scheme resolution."""
    configure_logging(level=logging.DEBUG if verbose else LOG_LEVEL)


@cli.command()
@context_options
def resolve(ctx: TaxContext) -> None:
    """Show region, VAT scheme, badge and legal notes for a transaction."""
    region = determine_region(ctx.seller_country, ctx.buyer_country)
    scheme = resolve_scheme(ctx)
    badge = summarize_tax_badge(ctx)
    style = SCHEME_STYLES[scheme]

    console.print(f"Region:  {get_message(ctx.language, f'region_{region.value}') or region.value} ({region.value})")
    console.print(f"Scheme:  [{style}]{get_message(ctx.language, f'scheme_{scheme.value}') or scheme.value}[/{style}] ({scheme.value})")
    console.print(f"Badge:   [bold {badge.color}]{badge.label}[/bold {badge.color}]")
    console.print("\nLegal notes:")
    for note in build_legal_notes(ctx):
        console.print(f"  - {note}")


@cli.command()
@context_options
@click.option("-l", "--line", "lines", multiple=True, required=True, help="QTY:PRICE:RATE[:DISCOUNT]")
@click.option("--scheme", type=click.Choice([s.value for s in TaxScheme]), default=None,
              help="Override the resolved scheme")
@click.option("-c", "--currency", default="EUR", show_default=True)
def totals(ctx: TaxContext, lines: tuple[str, ...], scheme: str | None, currency: str) -> None:
    """Compute net, VAT breakdown and gross for a set of lines."""
    doc_lines = [_parse_line(text) for text in lines]
    resolved = TaxScheme(scheme) if scheme else resolve_scheme(ctx)
    _print_totals(doc_lines, resolved, currency.upper(), ctx.language)


@cli.command("check-vat")
@click.argument("vat_ids", nargs=-1, required=True)
def check_vat(vat_ids: tuple[str, ...]) -> None:
    """Check VAT IDs for format plausibility (no registry lookup)."""
    table = Table(title="VAT ID format check")
    table.add_column("Input", width=22)
    table.add_column("Normalized", width=18)
    table.add_column("Plausible", width=9)
    table.add_column("Country", width=7)

    for vat_id in vat_ids:
        ok = is_likely_valid_vat(vat_id)
        table.add_row(
            vat_id,
            normalize_vat_id(vat_id),
            "[green]yes[/green]" if ok else "[red]no[/red]",
            get_vat_country_code(vat_id) or "—",
        )
    console.print(table)


@cli.command()
@click.argument("country", required=False)
def rates(country: str | None) -> None:
    """Show VAT rates from the rules table."""
    if country:
        r = get_rates_for_country(country)
        reduced = ", ".join(f"{format_rate(x)}%" for x in r.reduced or []) or "—"
        console.print(f"{country.upper()}: standard {format_rate(r.standard)}%, reduced {reduced}")
        return

    table = Table(title="VAT rules")
    table.add_column("Country", width=8)
    table.add_column("Currency", width=8)
    table.add_column("Standard", justify="right", width=9)
    table.add_column("Reduced", width=16)
    table.add_column("Reverse charge", width=14)

    for code in sorted(TAX_RULES):
        rule = TAX_RULES[code]
        standard = f"{format_rate(rule.rates.standard)}%" if rule.rates else "—"
        reduced = ", ".join(f"{format_rate(x)}%" for x in (rule.rates.reduced or [])) if rule.rates else ""
        table.add_row(code, rule.currency, standard, reduced or "—",
                      "yes" if rule.reverse_charge_enabled else "no")
    console.print(table)


@cli.command()
def countries() -> None:
    """Show the country table."""
    table = Table(title="Countries")
    table.add_column("Code", style="bold", width=6)
    table.add_column("Name", width=24)
    table.add_column("EU", width=4)

    for c in list_countries():
        table.add_row(c.code, c.name, "yes" if c.is_eu else "")
    console.print(table)


def _load_draft(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]{path} is not valid JSON: {e}[/red]")
        raise SystemExit(1)


def _sequence_floor(storage: LocalJsonStorage, prefix: str, year: int, doc_type: DocType) -> int:
    """Next free sequence number for prefix+year according to the ledger."""
    stem = f"{prefix}{year}-"
    highest = 0
    for d in storage.load_all():
        if d.type != doc_type or not d.number.startswith(stem):
            continue
        tail = d.number[len(stem):]
        if tail.isdigit():
            highest = max(highest, int(tail))
    return highest + 1


def _issue(path: Path, doc_type: DocType) -> None:
    draft = _load_draft(path)
    storage = _get_storage()

    try:
        seller = CompanyProfile.model_validate(draft.get("seller", {}))
        client = Client.model_validate(draft.get("client", {}))
        lines = [DocLine.model_validate(line) for line in draft.get("lines", [])]
        doc_date = date.fromisoformat(draft["date"]) if draft.get("date") else date.today()
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid draft: {escape(str(e))}[/red]")
        raise SystemExit(1)

    numbering = seller.numbering
    if doc_type == DocType.QUOTE:
        floor = _sequence_floor(storage, numbering.quote_prefix, doc_date.year, doc_type)
        numbering = numbering.model_copy(update={"quote_next": max(numbering.quote_next, floor)})
    else:
        floor = _sequence_floor(storage, numbering.invoice_prefix, doc_date.year, doc_type)
        numbering = numbering.model_copy(update={"invoice_next": max(numbering.invoice_next, floor)})
    number, numbering = next_document_number(numbering, doc_type, doc_date.year)
    seller = seller.model_copy(update={"numbering": numbering})

    try:
        document = build_document(
            seller,
            client,
            lines,
            doc_type=doc_type,
            number=number,
            date=doc_date,
            payment_days=draft.get("payment_days"),
            place_of_supply=draft.get("place_of_supply", ""),
            notes=draft.get("notes", ""),
        )
    except DocumentValidationError as e:
        console.print("[red]Document not created:[/red]")
        for error in e.errors:
            console.print(f"  [red]-[/red] {error}")
        raise SystemExit(1)

    storage.save(document)
    style = SCHEME_STYLES[document.tax_scheme]
    console.print(
        f"  [green]ok[/green]  {document.number} ({document.id}) — {client.name} "
        f"[{style}]{document.tax_scheme.value}[/{style}] "
        f"{format_currency(document.total_gross, document.currency, document.language)}"
    )


@cli.command()
@click.argument("draft", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def invoice(draft: Path) -> None:
    """Create an invoice from a JSON draft (seller, client, lines) and save it."""
    _issue(draft, DocType.INVOICE)


@cli.command()
@click.argument("draft", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def quote(draft: Path) -> None:
    """Create a quote from a JSON draft (seller, client, lines) and save it."""
    _issue(draft, DocType.QUOTE)


@cli.command("list-documents")
@click.option("-m", "--month", help="Filter by month (YYYY-MM)")
@click.option("-t", "--type", "doc_type", type=click.Choice([t.value for t in DocType]))
@click.option("-s", "--scheme", type=click.Choice([s.value for s in TaxScheme]))
def list_documents(month: str | None, doc_type: str | None, scheme: str | None) -> None:
    """List saved documents with optional filters."""
    documents = filter_documents(_get_storage().load_all(), month)
    if doc_type:
        documents = [d for d in documents if d.type.value == doc_type]
    if scheme:
        documents = [d for d in documents if d.tax_scheme.value == scheme]

    if not documents:
        console.print("[yellow]No documents found.[/yellow]")
        return

    table = Table(title="Documents")
    table.add_column("ID", style="dim", width=12)
    table.add_column("Number", width=14)
    table.add_column("Date", width=10)
    table.add_column("Client", width=20)
    table.add_column("Scheme", width=14)
    table.add_column("Net", justify="right", width=12)
    table.add_column("VAT", justify="right", width=10)
    table.add_column("Gross", justify="right", width=12)
    table.add_column("Cur", width=4)

    for d in sorted(documents, key=lambda x: x.date or date.min):
        style = SCHEME_STYLES[d.tax_scheme]
        table.add_row(
            d.id,
            d.number,
            str(d.date) if d.date else "—",
            d.client.name if d.client else "—",
            f"[{style}]{d.tax_scheme.value}[/{style}]",
            str(d.subtotal_net),
            str(d.tax_total),
            str(d.total_gross),
            d.currency,
        )
    console.print(table)


def _find_or_exit(storage: LocalJsonStorage, document_id: str) -> Document:
    document = storage.find_by_id(document_id) or storage.find_by_number(document_id)
    if not document:
        console.print(f"[red]Document {document_id!r} not found.[/red]")
        raise SystemExit(1)
    return document


@cli.command()
@click.argument("document_id")
def show(document_id: str) -> None:
    """Show a document with totals, legal notes and PDF readiness."""
    d = _find_or_exit(_get_storage(), document_id)
    lang = d.language

    console.print(f"[bold]{get_message(lang, f'doc_{d.type.value}') or d.type.value} {d.number}[/bold]  "
                  f"{format_date(d.date, lang) if d.date else ''}")
    client = f"{d.client.name} ({country_name(d.client.country or d.seller.country)})" if d.client else "—"
    console.print(f"{d.seller.display_name} → {client}")
    _print_totals(d.lines, d.tax_scheme, d.currency, lang)

    if d.legal_notes:
        console.print("Legal notes:")
        for note in d.legal_notes:
            console.print(f"  - {note}")

    problems = validate_document_for_pdf(d)
    if problems:
        console.print("[yellow]Not ready for PDF:[/yellow]")
        for p in problems:
            console.print(f"  [yellow]-[/yellow] {p}")


@cli.command()
@click.argument("document_id")
def delete(document_id: str) -> None:
    """Delete a document from the ledger."""
    storage = _get_storage()
    if not storage.delete(document_id):
        console.print(f"[red]Document {document_id!r} not found.[/red]")
        raise SystemExit(1)
    console.print(f"Deleted {document_id}")


@cli.command()
@click.option("-o", "--output", type=click.Path(path_type=Path), default="documents.csv",
              help="Output CSV file path")
@click.option("-m", "--month", help="Filter by month (YYYY-MM)")
def export(output: Path, month: str | None) -> None:
    """Export documents to CSV."""
    documents = filter_documents(_get_storage().load_all(), month)
    if not documents:
        console.print("[yellow]No documents to export.[/yellow]")
        return

    write_csv([d.model_dump(mode="json") for d in documents], output)
    console.print(f"Exported {len(documents)} documents to {output}")


@cli.command()
@click.option("-m", "--month", help="Filter by month (YYYY-MM)")
def report(month: str | None) -> None:
    """Revenue summary per currency."""
    print_summary(_get_storage().load_all(), month=month)


@cli.command("vat-report")
@click.option("-m", "--month", help="Filter by month (YYYY-MM)")
def vat_report(month: str | None) -> None:
    """Output VAT per rate, reverse-charge and untaxed sales."""
    print_vat_report(_get_storage().load_all(), month=month)
