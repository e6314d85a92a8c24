"""Revenue and VAT summaries over issued documents."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal

from rich.console import Console
from rich.table import Table

from faktura.formatting import format_rate
from faktura.models.document import Document
from faktura.models.enums import DocType, TaxScheme

console = Console()

ZERO = Decimal("0")


@dataclass
class MonthlyStats:
    total_revenue: Decimal = ZERO
    invoice_count: int = 0
    quote_count: int = 0


@dataclass
class RateTotals:
    base: Decimal = ZERO
    tax: Decimal = ZERO


@dataclass
class VatSummary:
    # rate -> totals, in first-seen order
    by_rate: dict[Decimal, RateTotals] = field(default_factory=dict)
    standard_count: int = 0
    reverse_charge_count: int = 0
    reverse_charge_net: Decimal = ZERO
    exempt_count: int = 0
    exempt_net: Decimal = ZERO

    @property
    def tax_total(self) -> Decimal:
        return sum((t.tax for t in self.by_rate.values()), ZERO)


def filter_documents(documents: list[Document], month: str | None = None,
                     currency: str | None = None) -> list[Document]:
    if month:
        documents = [d for d in documents if d.date and d.date.strftime("%Y-%m") == month]
    if currency:
        documents = [d for d in documents if d.currency.upper() == currency.upper()]
    return documents


def monthly_stats(documents: list[Document], month: str | None = None) -> MonthlyStats:
    """Counts per type; revenue is the gross of invoices only (quotes are offers)."""
    stats = MonthlyStats()
    for d in filter_documents(documents, month):
        if d.type == DocType.INVOICE:
            stats.invoice_count += 1
            stats.total_revenue += d.total_gross
        else:
            stats.quote_count += 1
    return stats


def vat_summary(documents: list[Document], month: str | None = None,
                currency: str | None = None) -> VatSummary:
    summary = VatSummary()
    invoices = [d for d in filter_documents(documents, month, currency) if d.type == DocType.INVOICE]
    for d in invoices:
        if d.tax_scheme == TaxScheme.STANDARD:
            summary.standard_count += 1
            for item in d.tax_breakdown:
                totals = summary.by_rate.setdefault(item.rate, RateTotals())
                totals.base += item.base
                totals.tax += item.tax
        elif d.tax_scheme == TaxScheme.REVERSE_CHARGE:
            summary.reverse_charge_count += 1
            summary.reverse_charge_net += d.subtotal_net
        else:
            summary.exempt_count += 1
            summary.exempt_net += d.subtotal_net
    return summary


def print_summary(documents: list[Document], month: str | None = None) -> None:
    """Print revenue per currency and document counts."""
    documents = filter_documents(documents, month)
    if not documents:
        console.print("[yellow]No documents for the given filters.[/yellow]")
        return

    by_currency: dict[str, list[Document]] = defaultdict(list)
    for d in documents:
        by_currency[d.currency].append(d)

    title = "Revenue Summary"
    if month:
        title += f" ({month})"
    table = Table(title=title)
    table.add_column("Currency", width=8)
    table.add_column("Invoices", justify="right", width=8)
    table.add_column("Quotes", justify="right", width=8)
    table.add_column("Revenue (gross)", justify="right", width=16)

    for cur in sorted(by_currency):
        stats = monthly_stats(by_currency[cur])
        table.add_row(cur, str(stats.invoice_count), str(stats.quote_count), str(stats.total_revenue))

    console.print(table)


def print_vat_report(documents: list[Document], month: str | None = None) -> None:
    """Print output VAT per rate plus reverse-charge and exempt sales, per currency."""
    documents = filter_documents(documents, month)
    currencies = sorted({d.currency for d in documents if d.type == DocType.INVOICE})
    if not currencies:
        console.print("[yellow]No invoices for the given filters.[/yellow]")
        return

    for cur in currencies:
        summary = vat_summary(documents, currency=cur)
        title = f"VAT Report — {cur}"
        if month:
            title += f" ({month})"
        table = Table(title=title)
        table.add_column("Treatment", width=28)
        table.add_column("Net", justify="right", width=14)
        table.add_column("VAT", justify="right", width=12)

        for rate, totals in summary.by_rate.items():
            table.add_row(f"Standard {format_rate(rate)}%", str(totals.base), str(totals.tax))
        if summary.reverse_charge_count:
            table.add_row(f"Reverse charge ({summary.reverse_charge_count})",
                          str(summary.reverse_charge_net), "0.00")
        if summary.exempt_count:
            table.add_row(f"Not taxed ({summary.exempt_count})", str(summary.exempt_net), "0.00")

        table.add_section()
        table.add_row("[bold]Output VAT[/bold]", "", str(summary.tax_total))
        console.print(table)
        console.print()
