"""Tests for locale formatting."""

from datetime import date
from decimal import Decimal

import pytest

from faktura.formatting import format_currency, format_date, format_number, format_rate
from faktura.models.enums import Language


class TestFormatNumber:
    @pytest.mark.parametrize(
        "value, language, expected",
        [
            (Decimal("1234.5"), Language.DE, "1.234,50"),
            (Decimal("1234.5"), Language.EN, "1,234.50"),
            (Decimal("1234567.891"), Language.EN, "1,234,567.89"),
            (Decimal("0"), Language.DE, "0,00"),
            (Decimal("-1500"), Language.DE, "-1.500,00"),
            (12, "en", "12.00"),
        ],
    )
    def test_separators(self, value, language, expected):
        assert format_number(value, language) == expected


class TestFormatCurrency:
    def test_german_symbol_after(self):
        assert format_currency(Decimal("240"), "EUR", Language.DE) == "240,00 €"

    def test_english_symbol_before(self):
        assert format_currency(Decimal("1240.5"), "EUR", Language.EN) == "€1,240.50"
        assert format_currency(Decimal("-5"), "USD", Language.EN) == "-$5.00"

    def test_code_without_symbol(self):
        assert format_currency(Decimal("10"), "SEK", Language.EN) == "SEK 10.00"
        assert format_currency(Decimal("10"), "CHF", Language.EN) == "CHF 10.00"
        assert format_currency(Decimal("10"), "SEK", Language.DE) == "10,00 SEK"


class TestFormatDate:
    def test_date(self):
        assert format_date(date(2026, 3, 1), Language.DE) == "01.03.2026"
        assert format_date(date(2026, 3, 1), Language.EN) == "03/01/2026"

    def test_iso_string(self):
        assert format_date("2026-03-01T10:00:00", Language.DE) == "01.03.2026"

    def test_unparsable_string_returned(self):
        assert format_date("soon", Language.EN) == "soon"


class TestFormatRate:
    @pytest.mark.parametrize("rate, expected", [("20", "20"), ("20.0", "20"), ("8.10", "8.1"), ("0", "0")])
    def test_trailing_zeros(self, rate, expected):
        assert format_rate(Decimal(rate)) == expected
