"""Country reference table and EU VAT area membership."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    is_eu: bool


# ISO 3166 alpha-2 codes; Greece is GR here even though its VAT prefix is EL
COUNTRIES: dict[str, Country] = {
    c.code: c
    for c in [
        Country("AT", "Austria", True),
        Country("BE", "Belgium", True),
        Country("BG", "Bulgaria", True),
        Country("HR", "Croatia", True),
        Country("CY", "Cyprus", True),
        Country("CZ", "Czech Republic", True),
        Country("DK", "Denmark", True),
        Country("EE", "Estonia", True),
        Country("FI", "Finland", True),
        Country("FR", "France", True),
        Country("DE", "Germany", True),
        Country("GR", "Greece", True),
        Country("HU", "Hungary", True),
        Country("IE", "Ireland", True),
        Country("IT", "Italy", True),
        Country("LV", "Latvia", True),
        Country("LT", "Lithuania", True),
        Country("LU", "Luxembourg", True),
        Country("MT", "Malta", True),
        Country("NL", "Netherlands", True),
        Country("PL", "Poland", True),
        Country("PT", "Portugal", True),
        Country("RO", "Romania", True),
        Country("SK", "Slovakia", True),
        Country("SI", "Slovenia", True),
        Country("ES", "Spain", True),
        Country("SE", "Sweden", True),
        Country("CH", "Switzerland", False),
        Country("GB", "United Kingdom", False),
        Country("NO", "Norway", False),
        Country("US", "United States", False),
        Country("CA", "Canada", False),
        Country("AU", "Australia", False),
        Country("JP", "Japan", False),
        Country("CN", "China", False),
        Country("BR", "Brazil", False),
        Country("IN", "India", False),
        Country("TR", "Turkey", False),
        Country("MX", "Mexico", False),
        Country("ZA", "South Africa", False),
        Country("KR", "South Korea", False),
        Country("SG", "Singapore", False),
        Country("AE", "United Arab Emirates", False),
        Country("NZ", "New Zealand", False),
        Country("OTHER", "Other", False),
    ]
}

EU_MEMBER_STATES: frozenset[str] = frozenset(c.code for c in COUNTRIES.values() if c.is_eu)

# VAT-number prefixes that differ from the ISO code
COUNTRY_ALIASES: dict[str, str] = {"EL": "GR"}


def normalize_country(code: str) -> str:
    code = code.strip().upper()
    return COUNTRY_ALIASES.get(code, code)


def get_country(code: str) -> Country | None:
    return COUNTRIES.get(normalize_country(code))


def country_name(code: str | None) -> str:
    if not code:
        return "Unknown"
    country = get_country(code)
    return country.name if country else code


def list_countries() -> list[Country]:
    return sorted(COUNTRIES.values(), key=lambda c: (not c.is_eu, c.name))
