"""Static tax configuration, read once at import from TAX_CONFIG_DIR.

rules.json          per-country rates, currency, note key, reverse-charge flag
messages.<lang>.json  UI/legal message strings (uid_hint, disclaimer, labels)
notes.json          legal note dictionaries: category -> language -> country|EU|default
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from faktura.config import TAX_CONFIG_DIR
from faktura.models.countries import normalize_country
from faktura.models.enums import Language
from faktura.models.tax import CountryTaxRule

NOTE_CATEGORIES = ("small_business", "reverse_charge", "domestic_standard", "export")


def _read_json(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f, parse_float=Decimal, parse_int=Decimal)


def load_rules(config_dir: Path = TAX_CONFIG_DIR) -> Mapping[str, CountryTaxRule]:
    raw = _read_json(config_dir / "rules.json")
    return MappingProxyType(
        {normalize_country(code): CountryTaxRule.model_validate(rule) for code, rule in raw.items()}
    )


def load_messages(config_dir: Path = TAX_CONFIG_DIR) -> Mapping[Language, Mapping[str, str]]:
    return MappingProxyType(
        {
            lang: MappingProxyType(_read_json(config_dir / f"messages.{lang.value}.json"))
            for lang in Language
        }
    )


def load_notes(
    config_dir: Path = TAX_CONFIG_DIR,
) -> Mapping[str, Mapping[Language, Mapping[str, str]]]:
    raw = _read_json(config_dir / "notes.json")
    notes = {}
    for category in NOTE_CATEGORIES:
        by_lang = raw.get(category, {})
        notes[category] = MappingProxyType(
            {lang: MappingProxyType(by_lang.get(lang.value, {})) for lang in Language}
        )
    return MappingProxyType(notes)


TAX_RULES = load_rules()
MESSAGES = load_messages()
LEGAL_NOTES = load_notes()


def get_message(language: Language, key: str) -> str | None:
    """Message text for a language, or None when the table has no such key."""
    language = Language(language)
    return MESSAGES[language].get(key)


def get_note(category: str, language: Language, country: str) -> str | None:
    """Note text for a country, falling back to the "EU" key, then "default"."""
    language = Language(language)
    bucket = LEGAL_NOTES[category][language]
    return bucket.get(country) or bucket.get("EU") or bucket.get("default")
