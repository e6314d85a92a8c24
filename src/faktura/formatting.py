"""Locale-aware rendering of amounts, rates and dates for de/en output."""

from __future__ import annotations

import datetime as _dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from faktura.models.enums import Language

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "CHF": "CHF",
}

_CENT = Decimal("0.01")


def _group(integer_digits: str, sep: str) -> str:
    groups = []
    while len(integer_digits) > 3:
        groups.insert(0, integer_digits[-3:])
        integer_digits = integer_digits[:-3]
    groups.insert(0, integer_digits)
    return sep.join(groups)


def format_number(value: Decimal | int | float, language: Language | str) -> str:
    """Two decimals with locale separators: de 1.234,56 / en 1,234.56."""
    try:
        amount = Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return str(value)

    sign = "-" if amount < 0 else ""
    integer_part, fraction = f"{abs(amount):f}".split(".")
    if Language(language) == Language.DE:
        return f"{sign}{_group(integer_part, '.')},{fraction}"
    return f"{sign}{_group(integer_part, ',')}.{fraction}"


def format_currency(amount: Decimal | int | float, currency: str, language: Language | str) -> str:
    number = format_number(amount, language)
    symbol = CURRENCY_SYMBOLS.get(currency.upper())

    if Language(language) == Language.DE:
        return f"{number} {symbol or currency}"
    if symbol is None or symbol == currency:
        return f"{currency} {number}"
    if number.startswith("-"):
        return f"-{symbol}{number[1:]}"
    return f"{symbol}{number}"


def format_date(value: _dt.date | str, language: Language | str) -> str:
    """de: DD.MM.YYYY, en: MM/DD/YYYY. Unparsable ISO strings come back unchanged."""
    if isinstance(value, str):
        try:
            value = _dt.date.fromisoformat(value[:10])
        except ValueError:
            return value

    if Language(language) == Language.DE:
        return value.strftime("%d.%m.%Y")
    return value.strftime("%m/%d/%Y")


def format_rate(rate: Decimal) -> str:
    """Percentage without trailing zeros: 20 -> "20", 8.10 -> "8.1"."""
    text = format(rate.normalize(), "f")
    return "0" if text == "-0" else text
