"""
Shared fixtures for the faktura test suite.

Provides:
- Seller/client profiles for the common AT/DE/US scenarios
- A TaxContext factory with sensible defaults
- Logging reset between tests (CLI tests install a rich handler)
"""

from decimal import Decimal

import pytest

from faktura.logging_config import reset_logging
from faktura.models.document import Client, CompanyProfile, DocLine
from faktura.models.enums import BusinessType, Language
from faktura.models.tax import TaxContext


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def make_context():
    def _make(**overrides) -> TaxContext:
        data = {
            "seller_country": "AT",
            "buyer_country": "AT",
            "business_type": BusinessType.B2C,
            "small_business_flag": False,
            "invoice_date_iso": "2026-03-01",
            "currency": "EUR",
            "language": Language.DE,
        }
        data.update(overrides)
        return TaxContext(**data)

    return _make


@pytest.fixture
def at_seller() -> CompanyProfile:
    return CompanyProfile(
        display_name="Studio Berger",
        email="office@studio-berger.at",
        country="AT",
        vat_id="ATU12345678",
        currency="EUR",
        language=Language.DE,
    )


@pytest.fixture
def de_business_client() -> Client:
    return Client(
        name="Kanzlei Roth GmbH",
        email="rechnung@kanzlei-roth.de",
        country="DE",
        vat_id="DE 123 456 789",
        business_type=BusinessType.B2B,
    )


@pytest.fixture
def at_consumer() -> Client:
    return Client(name="Anna Huber", country="AT", business_type=BusinessType.B2C)


@pytest.fixture
def us_client() -> Client:
    return Client(name="Acme Inc.", country="US", business_type=BusinessType.B2B)


@pytest.fixture
def two_lines() -> list[DocLine]:
    return [
        DocLine(qty=Decimal("2"), unit_price=Decimal("100"), tax_rate=Decimal("20"), title="Workshop"),
        DocLine(qty=Decimal("1"), unit_price=Decimal("50"), tax_rate=Decimal("10"), title="Handbook"),
    ]
