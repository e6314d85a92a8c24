"""Assemble invoices and quotes from a seller, a client and priced lines.

This is the layer that feeds the tax resolver and the totals calculator and
copies their results onto the persisted Document fields.
"""

from __future__ import annotations

import datetime as _dt
from typing import Iterable

from faktura.billing.totals import totals
from faktura.config import DEFAULT_LANGUAGE
from faktura.logging_config import get_logger
from faktura.models.document import Client, CompanyProfile, DocLine, Document, Numbering
from faktura.models.enums import BusinessType, DocType, Language
from faktura.models.tax import TaxContext
from faktura.tax.resolver import build_legal_notes, resolve_scheme
from faktura.documents.validators import (
    validate_client,
    validate_company,
    validate_document,
)

logger = get_logger("documents.builder")


class DocumentValidationError(ValueError):
    """Raised when a document cannot be built from the given input."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def tax_context_for(
    seller: CompanyProfile,
    client: Client,
    *,
    invoice_date: _dt.date | None = None,
    language: Language | None = None,
    currency: str | None = None,
) -> TaxContext:
    """Derive the transaction context from the two parties.

    A client without a country is treated as domestic; business type comes from
    the client, then the seller's default, then B2C.
    """
    business_type = client.business_type or seller.business_type_default or BusinessType.B2C
    return TaxContext(
        seller_country=seller.country,
        buyer_country=client.country or seller.country,
        business_type=business_type,
        seller_vat_id=seller.vat_id or None,
        buyer_vat_id=client.vat_id or None,
        small_business_flag=seller.small_business_flag,
        invoice_date_iso=invoice_date.isoformat() if invoice_date else "",
        currency=currency or client.default_currency or seller.currency,
        language=language or seller.language or Language(DEFAULT_LANGUAGE),
    )


def _apply_tax(document: Document, ctx: TaxContext) -> Document:
    scheme = resolve_scheme(ctx)
    result = totals(document.lines, scheme)
    return document.model_copy(
        update={
            "tax_scheme": scheme,
            "subtotal_net": result.subtotal_net,
            "tax_total": result.tax_total,
            "total_gross": result.total_gross,
            "tax_breakdown": list(result.tax_breakdown),
            "legal_notes": build_legal_notes(ctx),
        }
    )


def build_document(
    seller: CompanyProfile,
    client: Client,
    lines: Iterable[DocLine],
    *,
    doc_type: DocType = DocType.INVOICE,
    number: str,
    date: _dt.date,
    payment_days: int | None = None,
    place_of_supply: str = "",
    notes: str = "",
    language: Language | None = None,
    currency: str | None = None,
) -> Document:
    errors = validate_company(seller) + validate_client(client)
    if errors:
        raise DocumentValidationError(errors)

    ctx = tax_context_for(seller, client, invoice_date=date, language=language, currency=currency)
    draft = Document(
        type=doc_type,
        number=number,
        date=date,
        due_date=date + _dt.timedelta(days=payment_days) if payment_days else None,
        place_of_supply=place_of_supply,
        seller=seller,
        client=client,
        currency=ctx.currency,
        language=ctx.language,
        lines=list(lines),
        notes=notes,
    )

    errors = validate_document(draft)
    if errors:
        raise DocumentValidationError(errors)

    document = _apply_tax(draft, ctx)
    logger.info(
        "document_built",
        extra={
            "number": document.number,
            "doc_type": document.type.value,
            "scheme": document.tax_scheme.value,
            "gross": str(document.total_gross),
        },
    )
    return document


def recalculate(document: Document) -> Document:
    """Re-derive scheme, totals and notes after the parties or lines changed."""
    if document.client is None:
        raise DocumentValidationError(["Client is required"])

    ctx = tax_context_for(
        document.seller,
        document.client,
        invoice_date=document.date,
        language=document.language,
        currency=document.currency,
    )
    updated = _apply_tax(document, ctx)
    return updated.model_copy(update={"updated_at": _dt.datetime.now()})


def format_document_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}{year}-{sequence:03d}"


def next_document_number(
    numbering: Numbering, doc_type: DocType, year: int
) -> tuple[str, Numbering]:
    """Number for the next document and the numbering advanced past it."""
    if doc_type == DocType.QUOTE:
        number = format_document_number(numbering.quote_prefix, year, numbering.quote_next)
        advanced = numbering.model_copy(update={"quote_next": numbering.quote_next + 1})
    else:
        number = format_document_number(numbering.invoice_prefix, year, numbering.invoice_next)
        advanced = numbering.model_copy(update={"invoice_next": numbering.invoice_next + 1})
    return number, advanced
