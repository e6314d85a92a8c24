"""VAT identification number format checks (syntactic plausibility only).

No registry lookup is performed. A number is "likely valid" when it matches the
pattern of *any* known jurisdiction, not necessarily the buyer's declared
country, so group VAT numbers registered elsewhere are accepted.
"""

from __future__ import annotations

import re

from faktura.logging_config import get_logger

logger = get_logger("tax.vat_id")

MIN_VAT_ID_LENGTH = 4

_STRIP = re.compile(r"[\s\-.]")

# 27 EU member states (Greece uses the EL prefix) plus UK and Switzerland
VAT_PATTERNS: dict[str, re.Pattern[str]] = {
    "AT": re.compile(r"^ATU\d{8}$"),
    "BE": re.compile(r"^BE[01]\d{9}$"),
    "BG": re.compile(r"^BG\d{9,10}$"),
    "CY": re.compile(r"^CY\d{8}[A-Z]$"),
    "CZ": re.compile(r"^CZ\d{8,10}$"),
    "DE": re.compile(r"^DE\d{9}$"),
    "DK": re.compile(r"^DK\d{8}$"),
    "EE": re.compile(r"^EE\d{9}$"),
    "EL": re.compile(r"^EL\d{9}$"),
    "ES": re.compile(r"^ES[A-Z0-9]\d{7}[A-Z0-9]$"),
    "FI": re.compile(r"^FI\d{8}$"),
    "FR": re.compile(r"^FR[A-Z0-9]{2}\d{9}$"),
    "HR": re.compile(r"^HR\d{11}$"),
    "HU": re.compile(r"^HU\d{8}$"),
    "IE": re.compile(r"^IE\d[A-Z0-9]\d{5}[A-Z]{1,2}$"),
    "IT": re.compile(r"^IT\d{11}$"),
    "LT": re.compile(r"^LT(\d{9}|\d{12})$"),
    "LU": re.compile(r"^LU\d{8}$"),
    "LV": re.compile(r"^LV\d{11}$"),
    "MT": re.compile(r"^MT\d{8}$"),
    "NL": re.compile(r"^NL\d{9}B\d{2}$"),
    "PL": re.compile(r"^PL\d{10}$"),
    "PT": re.compile(r"^PT\d{9}$"),
    "RO": re.compile(r"^RO\d{2,10}$"),
    "SE": re.compile(r"^SE\d{12}$"),
    "SI": re.compile(r"^SI\d{8}$"),
    "SK": re.compile(r"^SK\d{10}$"),
    "GB": re.compile(r"^GB(\d{9}|\d{12}|GD\d{3}|HA\d{3})$"),
    "CH": re.compile(r"^CHE\d{9}(MWST|TVA|IVA)?$"),
}

VAT_PREFIXES = frozenset(VAT_PATTERNS)


def normalize_vat_id(vat_id: str | None) -> str:
    """Strip spaces, hyphens and dots and upper-case. Idempotent."""
    if not vat_id:
        return ""
    return _STRIP.sub("", vat_id).upper()


def is_likely_valid_vat(vat_id: str | None) -> bool:
    normalized = normalize_vat_id(vat_id)
    if len(normalized) < MIN_VAT_ID_LENGTH:
        return False

    for prefix, pattern in VAT_PATTERNS.items():
        if pattern.match(normalized):
            logger.debug("vat_id_checked", extra={"vat_id": normalized, "matched": prefix})
            return True

    logger.debug("vat_id_checked", extra={"vat_id": normalized, "matched": None})
    return False


def get_vat_country_code(vat_id: str | None) -> str | None:
    """Prefix hint ("CH" for CHE numbers); None if the prefix is not recognized."""
    normalized = normalize_vat_id(vat_id)
    if len(normalized) < 2:
        return None
    if normalized.startswith("CHE"):
        return "CH"
    prefix = normalized[:2]
    return prefix if prefix in VAT_PREFIXES else None
