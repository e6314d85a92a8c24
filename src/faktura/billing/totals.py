"""Document totals: discounted line nets, per-rate tax breakdown, gross.

Amounts are accumulated at full Decimal precision and rounded to cents once,
at output. Input ranges are not checked here (see documents.validators).
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal
from typing import Iterable

from faktura.logging_config import get_logger
from faktura.models.document import DocLine, TaxBreakdownItem, TotalsResult
from faktura.models.enums import TaxScheme

logger = get_logger("billing.totals")

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
_HALF = Decimal("0.5")

UNTAXED_SCHEMES = frozenset({TaxScheme.REVERSE_CHARGE, TaxScheme.EXEMPT})


def round_cents(amount: Decimal) -> Decimal:
    """Round to two decimals, ties toward positive infinity (Math.round on cents)."""
    cents = (amount * HUNDRED + _HALF).to_integral_value(rounding=ROUND_FLOOR)
    return (cents / HUNDRED).quantize(CENT)


def price_after_discount(unit_price: Decimal, discount_pct: Decimal | None = None) -> Decimal:
    if not discount_pct or discount_pct <= 0:
        return unit_price
    return unit_price * (1 - discount_pct / HUNDRED)


def line_net(line: DocLine) -> Decimal:
    return price_after_discount(line.unit_price, line.discount_pct) * line.qty


def line_tax(line: DocLine, scheme: TaxScheme) -> Decimal:
    """Tax on one line; the document scheme overrides the line's nominal rate."""
    scheme = TaxScheme(scheme)
    if scheme in UNTAXED_SCHEMES:
        return ZERO
    return line_net(line) * (line.tax_rate / HUNDRED)


def totals(lines: Iterable[DocLine], scheme: TaxScheme) -> TotalsResult:
    scheme = TaxScheme(scheme)
    subtotal_net = ZERO
    tax_total = ZERO
    # Keyed by nominal rate; dict order is first-seen order
    by_rate: dict[Decimal, list[Decimal]] = {}
    count = 0

    for line in lines:
        net = line_net(line)
        tax = line_tax(line, scheme)
        subtotal_net += net
        tax_total += tax
        count += 1

        if scheme == TaxScheme.STANDARD and line.tax_rate > 0:
            bucket = by_rate.setdefault(line.tax_rate, [ZERO, ZERO])
            bucket[0] += net
            bucket[1] += tax

    breakdown = [
        TaxBreakdownItem(rate=rate, base=round_cents(base), tax=round_cents(tax))
        for rate, (base, tax) in by_rate.items()
    ]

    result = TotalsResult(
        subtotal_net=round_cents(subtotal_net),
        tax_total=round_cents(tax_total),
        # From the unrounded sums; may differ from net + tax by one cent
        total_gross=round_cents(subtotal_net + tax_total),
        tax_breakdown=breakdown,
    )

    logger.debug(
        "totals_calculated",
        extra={
            "lines": count,
            "scheme": scheme.value,
            "net": str(result.subtotal_net),
            "tax": str(result.tax_total),
            "gross": str(result.total_gross),
        },
    )
    return result
