"""
Tests for VAT-ID format plausibility.

Covers:
- Normalization (separators, case, empty input)
- Pattern matching across all known jurisdictions
- Country-prefix hints
"""

import pytest

from hypothesis import given
from hypothesis import strategies as st

from faktura.tax.vat_id import (
    VAT_PATTERNS,
    get_vat_country_code,
    is_likely_valid_vat,
    normalize_vat_id,
)


class TestNormalizeVatId:
    """Tests for normalize_vat_id."""

    def test_strips_separators_and_uppercases(self):
        """Spaces, hyphens and dots are removed, letters upper-cased."""
        assert normalize_vat_id("atu 12.345-678") == "ATU12345678"

    def test_empty_and_none(self):
        """Empty or missing input yields an empty string."""
        assert normalize_vat_id("") == ""
        assert normalize_vat_id(None) == ""

    def test_idempotent_examples(self):
        """Normalizing twice changes nothing."""
        for raw in ["CHE-123.456.789 MWST", " de123456789 ", "x"]:
            once = normalize_vat_id(raw)
            assert normalize_vat_id(once) == once

    @given(st.text(max_size=40))
    def test_idempotent_property(self, raw):
        """normalize(normalize(x)) == normalize(x) for any text."""
        once = normalize_vat_id(raw)
        assert normalize_vat_id(once) == once


class TestIsLikelyValidVat:
    """Tests for is_likely_valid_vat."""

    @pytest.mark.parametrize(
        "vat_id",
        [
            "ATU12345678",
            "DE123456789",
            "DE 123 456 789",
            "BE0123456789",
            "EL123456789",
            "FRXX123456789",
            "NL123456789B01",
            "IE1234567WA",
            "CHE-123.456.789 MWST",
            "CHE123456789",
            "GB123456789",
            "GBGD123",
            "ESX1234567X",
            "SE123456789012",
        ],
    )
    def test_accepts_known_formats(self, vat_id):
        """Numbers shaped like a known jurisdiction's VAT ID pass."""
        assert is_likely_valid_vat(vat_id) is True

    @pytest.mark.parametrize(
        "vat_id",
        [None, "", "AT", "DE1", "DE12345678", "ATU1234567", "US123456789", "12345678901", "BE2123456789"],
    )
    def test_rejects_unknown_or_short(self, vat_id):
        """Short strings and unknown shapes fail."""
        assert is_likely_valid_vat(vat_id) is False

    def test_covers_eu_uk_and_switzerland(self):
        """27 EU prefixes (with EL for Greece) plus GB and CH."""
        assert len(VAT_PATTERNS) == 29
        assert {"EL", "GB", "CH"} <= set(VAT_PATTERNS)

    def test_prefix_need_not_match_any_particular_country(self):
        """A German number is plausible whatever country the buyer declared."""
        assert is_likely_valid_vat("DE123456789")


class TestGetVatCountryCode:
    """Tests for get_vat_country_code."""

    def test_two_letter_prefix(self):
        assert get_vat_country_code("de123456789") == "DE"
        assert get_vat_country_code("EL123456789") == "EL"

    def test_swiss_prefix(self):
        """CHE numbers map to CH."""
        assert get_vat_country_code("CHE-123.456.789") == "CH"

    def test_unknown_prefix(self):
        assert get_vat_country_code("US123") is None
        assert get_vat_country_code("X") is None
        assert get_vat_country_code(None) is None
