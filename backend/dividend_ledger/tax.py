"""Capital-gains tax helpers applying the annual exemption and flat rate."""

from __future__ import annotations

from decimal import Decimal

from .models import ZERO, TaxSummary
from .policy import DEFAULT_POLICY, TaxPolicy


def remaining_exemption(already_realized: Decimal, policy: TaxPolicy = DEFAULT_POLICY) -> Decimal:
    """Return how much of the annual exemption is still unused."""

    return max(ZERO, policy.annual_exemption - already_realized)


def compute_tax_summary(total_gain: Decimal, policy: TaxPolicy = DEFAULT_POLICY) -> TaxSummary:
    """Apply the exemption and flat rate to the year's net realized gain."""

    exemption_used = min(max(total_gain, ZERO), policy.annual_exemption)
    taxable_base = max(ZERO, total_gain - policy.annual_exemption)
    return TaxSummary(
        total_gain=total_gain,
        exemption_used=exemption_used,
        taxable_base=taxable_base,
        estimated_tax=taxable_base * policy.capital_gains_rate,
    )


__all__ = ["compute_tax_summary", "remaining_exemption"]
