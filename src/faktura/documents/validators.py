"""Form-level validation run before totals are computed or a PDF is produced.

Every function returns a list of human-readable error strings; an empty list
means the input is acceptable. Nothing here raises.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Iterable, Mapping

from faktura.logging_config import get_logger
from faktura.models.countries import get_country
from faktura.models.document import Client, CompanyProfile, DocLine, Document
from faktura.models.enums import BusinessType, TaxScheme
from faktura.models.tax import TaxContext
from faktura.tax.vat_id import is_likely_valid_vat

logger = get_logger("documents.validators")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

REVERSE_CHARGE_MARKERS = ("reverse", "umkehr")
SMALL_BUSINESS_MARKERS = ("kleinunternehm", "small business")


def _check_email(email: str, errors: list[str]) -> None:
    if email and not EMAIL_RE.match(email):
        errors.append("Invalid email format")


def _check_vat_id(vat_id: str, errors: list[str]) -> None:
    if vat_id and vat_id.strip() and not is_likely_valid_vat(vat_id):
        errors.append("VAT ID format appears invalid")


def _check_country(code: str | None, errors: list[str]) -> None:
    if code and get_country(code) is None:
        errors.append(f"Unknown country code: {code}")


def _done(target: str, errors: list[str]) -> list[str]:
    logger.debug("validation_completed", extra={"target": target, "errors": len(errors)})
    return errors


def validate_company(profile: CompanyProfile) -> list[str]:
    errors: list[str] = []
    if not profile.display_name.strip():
        errors.append("Display name is required")
    if not profile.country:
        errors.append("Country is required")
    _check_country(profile.country, errors)
    if not profile.currency:
        errors.append("Currency is required")
    _check_email(profile.email, errors)
    _check_vat_id(profile.vat_id, errors)
    return _done("company", errors)


def validate_client(client: Client) -> list[str]:
    errors: list[str] = []
    if not client.name.strip():
        errors.append("Client name is required")
    _check_country(client.country, errors)
    _check_email(client.email, errors)
    _check_vat_id(client.vat_id, errors)
    return _done("client", errors)


def validate_lines(lines: Iterable[DocLine]) -> list[str]:
    """Range checks the totals calculator deliberately leaves to its callers."""
    errors: list[str] = []
    for i, line in enumerate(lines, start=1):
        if line.qty <= _ZERO:
            errors.append(f"Line {i}: quantity must be greater than 0")
        if line.unit_price < _ZERO:
            errors.append(f"Line {i}: unit price must not be negative")
        if not _ZERO <= line.tax_rate <= _HUNDRED:
            errors.append(f"Line {i}: tax rate must be between 0 and 100")
        if line.discount_pct is not None and not _ZERO <= line.discount_pct <= _HUNDRED:
            errors.append(f"Line {i}: discount must be between 0 and 100")
    return _done("lines", errors)


def validate_document(doc: Document) -> list[str]:
    errors: list[str] = []
    if not doc.number.strip():
        errors.append("Document number is required")
    if doc.date is None:
        errors.append("Date is required")
    if doc.client is None:
        errors.append("Client is required")
    if not doc.lines:
        errors.append("At least one line item is required")
    else:
        errors.extend(validate_lines(doc.lines))
    return _done("document", errors)


def validate_tax_context(ctx: TaxContext | Mapping[str, Any]) -> list[str]:
    """Check raw form values (or a built context) against the declared scheme."""
    data = ctx.model_dump() if isinstance(ctx, TaxContext) else dict(ctx)
    errors: list[str] = []

    if not data.get("seller_country"):
        errors.append("Seller country is required")
    if not data.get("buyer_country"):
        errors.append("Buyer country is required")
    if not data.get("business_type"):
        errors.append("Business type is required")

    declared = data.get("scheme")
    if declared == TaxScheme.REVERSE_CHARGE:
        if data.get("business_type") != BusinessType.B2B:
            errors.append("Reverse charge requires B2B transaction")
        if not is_likely_valid_vat(data.get("buyer_vat_id")):
            errors.append("Reverse charge requires valid buyer VAT ID")

    if data.get("small_business_flag") and declared == TaxScheme.STANDARD:
        errors.append("Small business flag conflicts with standard VAT scheme")

    return _done("tax_context", errors)


def _has_note(notes: list[str], markers: tuple[str, ...]) -> bool:
    return any(marker in note.lower() for note in notes for marker in markers)


def validate_document_for_pdf(doc: Document) -> list[str]:
    """Consistency between scheme, tax amount and legal notes before rendering."""
    errors: list[str] = []

    if doc.tax_scheme == TaxScheme.EXEMPT and doc.tax_total > 0:
        errors.append("EXEMPT scheme must have zero tax")
    if doc.tax_scheme == TaxScheme.REVERSE_CHARGE and doc.tax_total > 0:
        errors.append("REVERSE_CHARGE scheme must have zero tax")

    if doc.tax_scheme == TaxScheme.REVERSE_CHARGE and not _has_note(doc.legal_notes, REVERSE_CHARGE_MARKERS):
        errors.append("REVERSE_CHARGE requires a reverse-charge notice in legal notes")

    if (
        doc.tax_scheme == TaxScheme.EXEMPT
        and doc.seller.small_business_flag
        and not _has_note(doc.legal_notes, SMALL_BUSINESS_MARKERS)
    ):
        errors.append("EXEMPT (small business) requires a small business notice in legal notes")

    return _done("document_pdf", errors)
