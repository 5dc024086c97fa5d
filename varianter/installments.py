"""
Zero-interest installment calculator.

The price table comes from an InstallmentBackend as {term_count: price_q}.
The applicable plan is the term whose listed price is closest to the
current price without exceeding it.

Usage:
    plan = compute_zero_interest_plan({6: 600000, 12: 1140000}, 1000000, enabled=True)
    plan.term_count          # 6
    plan.per_installment_q   # 100000
    plan.display_full        # "6 cuotas de $ 100.000 sin interés"
"""

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.utils.translation import gettext as _

from varianter.formatting import format_price
from varianter.protocols.catalog import InstallmentPlan

logger = logging.getLogger(__name__)


def _as_integer(value) -> int | None:
    """Integral value of ``value`` or None (bools and fractions rejected)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or number != number.to_integral_value():
        return None
    return int(number)


def _price_table(price_by_term_count) -> dict[int, int]:
    """Usable {term_count: price_q} entries; malformed ones are skipped."""
    if not isinstance(price_by_term_count, Mapping):
        return {}

    table = {}
    for raw_term, raw_price in price_by_term_count.items():
        term = _as_integer(raw_term)
        price = _as_integer(raw_price)
        if term is None or term < 1 or price is None or price <= 0:
            logger.warning("Skipping malformed installment entry %r: %r", raw_term, raw_price)
            continue
        table[term] = price
    return table


def installment_amount(price_q: int, term_count: int) -> int:
    """Per-installment amount, rounded half-up to the smallest unit."""
    amount = Decimal(price_q) / Decimal(term_count)
    return int(amount.to_integral_value(rounding=ROUND_HALF_UP))


def compute_zero_interest_plan(
    price_by_term_count: Mapping | None,
    current_price_q: int | None,
    enabled: bool,
) -> InstallmentPlan | None:
    """
    Derive the zero-interest plan for ``current_price_q``.

    Returns None (plain cash price) when disabled, when the table has no
    usable entry at or below the current price, or when the only
    applicable term is a single payment. Never raises on bad data.

    Args:
        price_by_term_count: {term_count: listed price in smallest unit}
        current_price_q: Price of the selected variant
        enabled: Product/feature flag for zero-interest plans

    Returns:
        InstallmentPlan | None
    """
    if not enabled:
        return None

    current = _as_integer(current_price_q)
    if current is None or current <= 0:
        return None

    candidates = [
        (price, term)
        for term, price in _price_table(price_by_term_count).items()
        if price <= current
    ]
    if not candidates:
        logger.debug("No installment price at or below %s", current)
        return None

    # Highest listed price wins; equal prices go to the longest term.
    total_price_q, term_count = max(candidates)
    if term_count == 1:
        return None

    per_installment_q = installment_amount(total_price_q, term_count)
    if per_installment_q <= 0:
        logger.debug("%s over %s terms rounds to nothing", total_price_q, term_count)
        return None
    amount = format_price(per_installment_q)

    return InstallmentPlan(
        term_count=term_count,
        per_installment_q=per_installment_q,
        total_price_q=total_price_q,
        is_zero_interest=total_price_q <= current,
        display_full=_("%(count)s cuotas de %(amount)s sin interés")
        % {"count": term_count, "amount": amount},
        display_short=f"{amount} x{term_count}",
    )
