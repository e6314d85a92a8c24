"""Tests for the static tax tables."""

from decimal import Decimal

import pytest

from faktura.config import TAX_CONFIG_DIR
from faktura.models.countries import EU_MEMBER_STATES
from faktura.models.enums import Language
from faktura.tax.tables import (
    LEGAL_NOTES,
    MESSAGES,
    NOTE_CATEGORIES,
    TAX_RULES,
    get_message,
    get_note,
    load_rules,
)


class TestRulesTable:
    def test_every_member_state_has_rates(self):
        for code in EU_MEMBER_STATES:
            assert TAX_RULES[code].rates is not None, code
            assert TAX_RULES[code].reverse_charge_enabled

    def test_rates_are_decimals(self):
        assert TAX_RULES["FI"].rates.standard == Decimal("25.5")
        assert isinstance(TAX_RULES["CH"].rates.standard, Decimal)

    def test_read_only(self):
        with pytest.raises(TypeError):
            TAX_RULES["XX"] = TAX_RULES["AT"]

    def test_reload_from_directory(self):
        assert dict(load_rules(TAX_CONFIG_DIR)) == dict(TAX_RULES)


class TestMessages:
    @pytest.mark.parametrize("language", list(Language))
    def test_required_keys(self, language):
        assert MESSAGES[language]["uid_hint"]
        assert MESSAGES[language]["disclaimer"]

    def test_unknown_key_is_none(self):
        assert get_message(Language.EN, "no_such_key") is None

    def test_accepts_plain_language_string(self):
        assert get_message("en", "disclaimer") == MESSAGES[Language.EN]["disclaimer"]


class TestNotes:
    def test_all_categories_in_both_languages(self):
        for category in NOTE_CATEGORIES:
            for language in Language:
                assert LEGAL_NOTES[category][language]["default"]

    def test_lookup_order(self):
        """Exact country, then EU, then default."""
        assert "Österreich" in get_note("reverse_charge", Language.DE, "AT")
        assert get_note("reverse_charge", Language.DE, "PL") == LEGAL_NOTES["reverse_charge"][Language.DE]["EU"]
        assert get_note("domestic_standard", Language.EN, "PL") == (
            LEGAL_NOTES["domestic_standard"][Language.EN]["default"]
        )
