"""
Tests for document assembly.

Covers:
- Tax context derivation from seller and client
- End-to-end documents for the standard, reverse-charge, exempt and export cases
- Recalculation after edits
- Document numbering
"""

from datetime import date
from decimal import Decimal

import pytest

from faktura.documents.builder import (
    DocumentValidationError,
    build_document,
    next_document_number,
    recalculate,
    tax_context_for,
)
from faktura.models.document import Client, DocLine, Numbering
from faktura.models.enums import BusinessType, DocType, Language, TaxScheme


class TestTaxContextFor:
    def test_from_profiles(self, at_seller, de_business_client):
        ctx = tax_context_for(at_seller, de_business_client, invoice_date=date(2026, 3, 1))
        assert ctx.seller_country == "AT"
        assert ctx.buyer_country == "DE"
        assert ctx.business_type == BusinessType.B2B
        assert ctx.buyer_vat_id == "DE 123 456 789"
        assert ctx.invoice_date_iso == "2026-03-01"
        assert ctx.language == Language.DE

    def test_client_without_country_is_domestic(self, at_seller):
        ctx = tax_context_for(at_seller, Client(name="Walk-in"))
        assert ctx.buyer_country == "AT"
        assert ctx.business_type == BusinessType.B2C

    def test_seller_default_business_type(self, at_seller):
        seller = at_seller.model_copy(update={"business_type_default": BusinessType.B2B})
        assert tax_context_for(seller, Client(name="X")).business_type == BusinessType.B2B


class TestBuildDocument:
    def test_domestic_invoice(self, at_seller, at_consumer, two_lines):
        doc = build_document(at_seller, at_consumer, two_lines, number="RE-2026-001",
                             date=date(2026, 3, 1), payment_days=14)

        assert doc.tax_scheme == TaxScheme.STANDARD
        assert doc.subtotal_net == Decimal("250.00")
        assert doc.tax_total == Decimal("45.00")
        assert doc.total_gross == Decimal("295.00")
        assert [item.rate for item in doc.tax_breakdown] == [Decimal("20"), Decimal("10")]
        assert doc.due_date == date(2026, 3, 15)
        assert len(doc.legal_notes) == 2

    def test_reverse_charge_invoice(self, at_seller, de_business_client, two_lines):
        doc = build_document(at_seller, de_business_client, two_lines, number="RE-2026-002",
                             date=date(2026, 3, 1))

        assert doc.tax_scheme == TaxScheme.REVERSE_CHARGE
        assert doc.tax_total == Decimal("0.00")
        assert doc.total_gross == Decimal("250.00")
        assert doc.tax_breakdown == []
        assert any("Art. 196" in n for n in doc.legal_notes)

    def test_small_business_invoice(self, at_seller, at_consumer, two_lines):
        seller = at_seller.model_copy(update={"small_business_flag": True})
        doc = build_document(seller, at_consumer, two_lines, number="RE-2026-003", date=date(2026, 3, 1))

        assert doc.tax_scheme == TaxScheme.EXEMPT
        assert doc.total_gross == doc.subtotal_net
        assert "Kleinunternehmerregelung" in doc.legal_notes[0]

    def test_export_quote_in_english(self, at_seller, us_client, two_lines):
        doc = build_document(at_seller, us_client, two_lines, doc_type=DocType.QUOTE,
                             number="AN-2026-001", date=date(2026, 3, 1), language=Language.EN)

        assert doc.type == DocType.QUOTE
        assert doc.tax_scheme == TaxScheme.EXEMPT
        assert doc.language == Language.EN
        assert any("export" in n.lower() for n in doc.legal_notes)

    def test_invalid_lines_raise(self, at_seller, at_consumer):
        with pytest.raises(DocumentValidationError) as exc_info:
            build_document(at_seller, at_consumer,
                           [DocLine(qty=Decimal("0"), unit_price=Decimal("10"))],
                           number="RE-2026-004", date=date(2026, 3, 1))
        assert exc_info.value.errors == ["Line 1: quantity must be greater than 0"]

    def test_invalid_parties_raise(self, at_seller, two_lines):
        with pytest.raises(DocumentValidationError, match="Client name is required"):
            build_document(at_seller, Client(), two_lines, number="RE-2026-005", date=date(2026, 3, 1))


class TestRecalculate:
    def test_client_change_switches_scheme(self, at_seller, at_consumer, de_business_client, two_lines):
        doc = build_document(at_seller, at_consumer, two_lines, number="RE-2026-001", date=date(2026, 3, 1))
        assert doc.tax_scheme == TaxScheme.STANDARD

        edited = recalculate(doc.model_copy(update={"client": de_business_client}))
        assert edited.tax_scheme == TaxScheme.REVERSE_CHARGE
        assert edited.tax_total == Decimal("0.00")
        assert edited.id == doc.id
        assert edited.updated_at >= doc.updated_at


class TestNumbering:
    def test_invoice_number(self):
        number, advanced = next_document_number(Numbering(), DocType.INVOICE, 2026)
        assert number == "RE-2026-001"
        assert advanced.invoice_next == 2
        assert advanced.quote_next == 1

    def test_quote_number(self):
        numbering = Numbering(quote_prefix="Q-", quote_next=42)
        number, advanced = next_document_number(numbering, DocType.QUOTE, 2026)
        assert number == "Q-2026-042"
        assert advanced.quote_next == 43
        assert numbering.quote_next == 42
