"""Tax scheme resolution, legal disclosure notes and the UI badge.

All functions are pure: they read only their arguments and the static tables
loaded by faktura.tax.tables, and never raise for unknown countries.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from faktura.formatting import format_rate
from faktura.logging_config import get_logger
from faktura.models.countries import EU_MEMBER_STATES, normalize_country
from faktura.models.enums import BusinessType, TaxRegion, TaxScheme
from faktura.models.tax import TaxBadge, TaxContext, TaxRates
from faktura.tax.tables import TAX_RULES, get_message, get_note
from faktura.tax.vat_id import is_likely_valid_vat

logger = get_logger("tax.resolver")

BADGE_GREEN = "#10B981"
BADGE_BLUE = "#3B82F6"
BADGE_GRAY = "#6B7280"
BADGE_PURPLE = "#8B5CF6"

_NO_RATES = TaxRates(standard=Decimal("0"))


def determine_region(seller_country: str, buyer_country: str) -> TaxRegion:
    seller = normalize_country(seller_country)
    buyer = normalize_country(buyer_country)

    if seller == buyer:
        region = TaxRegion.DOMESTIC
    elif seller in EU_MEMBER_STATES and buyer in EU_MEMBER_STATES:
        region = TaxRegion.INTRA_EU
    else:
        region = TaxRegion.EXTRA_EU

    logger.debug("region_determined", extra={"seller": seller, "buyer": buyer, "region": region.value})
    return region


def get_rates_for_country(country: str, date_iso: str = "") -> TaxRates:
    """Standard and reduced rates for a country.

    ``date_iso`` is accepted for future effective-dating and ignored today.
    Unknown countries (or entries without rates) degrade to a 0% standard rate.
    """
    rule = TAX_RULES.get(normalize_country(country))
    if rule is None or rule.rates is None:
        logger.warning("tax_rates_missing", extra={"country": country, "fallback_rate": "0"})
        return _NO_RATES
    return rule.rates


# ---------------------------------------------------------------------------
# Scheme rules: evaluated top to bottom, the first one that applies wins
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SchemeRule:
    name: str
    applies: Callable[[TaxContext, TaxRegion], bool]
    scheme: TaxScheme


def _is_small_business(ctx: TaxContext, region: TaxRegion) -> bool:
    return ctx.small_business_flag


def _is_intra_eu_b2b_with_vat_id(ctx: TaxContext, region: TaxRegion) -> bool:
    return (
        region == TaxRegion.INTRA_EU
        and ctx.business_type == BusinessType.B2B
        and is_likely_valid_vat(ctx.buyer_vat_id)
    )


def _is_domestic(ctx: TaxContext, region: TaxRegion) -> bool:
    return region == TaxRegion.DOMESTIC


def _always(ctx: TaxContext, region: TaxRegion) -> bool:
    return True


# Intra-EU B2C, intra-EU B2B without a plausible VAT ID and every extra-EU
# sale end up in the last rule. Distance-selling thresholds and OSS are not
# modelled; add a new rule above it rather than changing this one.
SCHEME_RULES: tuple[SchemeRule, ...] = (
    SchemeRule("small_business", _is_small_business, TaxScheme.EXEMPT),
    SchemeRule("intra_eu_reverse_charge", _is_intra_eu_b2b_with_vat_id, TaxScheme.REVERSE_CHARGE),
    SchemeRule("domestic", _is_domestic, TaxScheme.STANDARD),
    SchemeRule("not_taxed_here", _always, TaxScheme.EXEMPT),
)


def match_scheme_rule(ctx: TaxContext) -> SchemeRule:
    """The first rule in SCHEME_RULES that applies to ``ctx``."""
    region = determine_region(ctx.seller_country, ctx.buyer_country)
    for rule in SCHEME_RULES:
        if rule.applies(ctx, region):
            return rule
    # SCHEME_RULES ends with a catch-all
    raise AssertionError("no scheme rule matched")


def resolve_scheme(ctx: TaxContext) -> TaxScheme:
    rule = match_scheme_rule(ctx)
    logger.debug(
        "scheme_resolved",
        extra={
            "rule": rule.name,
            "scheme": rule.scheme.value,
            "small_business": ctx.small_business_flag,
            "business_type": ctx.business_type.value,
        },
    )
    return rule.scheme


# ---------------------------------------------------------------------------
# Legal notes and badge
# ---------------------------------------------------------------------------


def _add_note(notes: dict[str, None], text: str | None) -> None:
    if text and text.strip():
        notes.setdefault(text.strip(), None)


def _small_business_note_key(country: str) -> str:
    rule = TAX_RULES.get(country)
    if rule is not None and rule.small_business_note_key:
        return rule.small_business_note_key
    return country


def build_legal_notes(ctx: TaxContext) -> list[str]:
    """De-duplicated disclosure texts in insertion order, in ``ctx.language``.

    Each category is looked up by seller country, then "EU", then "default".
    The generic disclaimer is always last.
    """
    lang = ctx.language
    seller = ctx.seller_country
    scheme = resolve_scheme(ctx)
    region = determine_region(ctx.seller_country, ctx.buyer_country)
    notes: dict[str, None] = {}

    if ctx.small_business_flag:
        _add_note(notes, get_note("small_business", lang, _small_business_note_key(seller)))

    if scheme == TaxScheme.REVERSE_CHARGE:
        _add_note(notes, get_note("reverse_charge", lang, seller))
        _add_note(notes, get_message(lang, "uid_hint"))

    if scheme == TaxScheme.STANDARD and region == TaxRegion.DOMESTIC:
        _add_note(notes, get_note("domestic_standard", lang, seller))

    if region == TaxRegion.EXTRA_EU and scheme == TaxScheme.EXEMPT:
        _add_note(notes, get_note("export", lang, seller))

    _add_note(notes, get_message(lang, "disclaimer"))

    result = list(notes)
    logger.debug("legal_notes_built", extra={"count": len(result), "language": lang.value})
    return result


def summarize_tax_badge(ctx: TaxContext) -> TaxBadge:
    scheme = resolve_scheme(ctx)

    if ctx.small_business_flag:
        return TaxBadge(label="KUR", color=BADGE_GREEN)
    if scheme == TaxScheme.REVERSE_CHARGE:
        return TaxBadge(label="RC", color=BADGE_BLUE)
    if scheme == TaxScheme.EXEMPT:
        return TaxBadge(label="0%", color=BADGE_GRAY)

    rates = get_rates_for_country(ctx.seller_country, ctx.invoice_date_iso)
    return TaxBadge(label=f"{format_rate(rates.standard)}%", color=BADGE_PURPLE)
