"""Sell-plan strategies built on top of the current portfolio snapshot.

Two objectives are supported:

* exemption fill: for each gain position on its own, how many shares can be
  sold before the year's remaining tax-free allowance is used up. The result
  is an :class:`AlternativeSet`; its items are options, not one trade.
* target amount: raise a cash amount in the home currency while realizing as
  little gain as possible. Losses are sold first, then positions in order of
  increasing gain ratio. The result is a :class:`CombinedPlan`.

Both functions are pure: prices are native-currency quotes and the exchange
rate converts them into the home currency.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from typing import Dict, List, Mapping

from .models import ZERO, AlternativeSet, CombinedPlan, SellRecommendation
from .policy import DEFAULT_POLICY, TaxPolicy
from .snapshot import HoldingSnapshot
from .tax import compute_tax_summary, remaining_exemption


@dataclass(frozen=True)
class _Candidate:
    holding: HoldingSnapshot
    price_native: Decimal
    price_home: Decimal

    @property
    def gain_ratio(self) -> Decimal:
        return (self.price_home - self.holding.average_cost) / self.price_home


@dataclass(frozen=True)
class UnrealizedHolding:
    symbol: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Decimal
    market_value_home: Decimal
    unrealized_gain_home: Decimal


def _usable_price(prices: Mapping[str, Decimal], symbol: str) -> Decimal | None:
    price = prices.get(symbol)
    if price is None or price <= 0:
        return None
    return Decimal(price)


def _recommendation(
    holding: HoldingSnapshot,
    quantity: Decimal,
    price_native: Decimal,
    exchange_rate: Decimal,
) -> SellRecommendation:
    price_home = price_native * exchange_rate
    proceeds = quantity * price_home
    cost = quantity * holding.average_cost
    return SellRecommendation(
        symbol=holding.symbol,
        sell_quantity=quantity,
        price_native=price_native,
        exchange_rate=exchange_rate,
        proceeds_home=proceeds,
        cost_basis_home=cost,
        realized_gain_home=proceeds - cost,
    )


def build_exemption_safe_plan(
    portfolio: Mapping[str, HoldingSnapshot],
    prices: Mapping[str, Decimal],
    exchange_rate: Decimal,
    already_realized_gain: Decimal,
    policy: TaxPolicy = DEFAULT_POLICY,
) -> AlternativeSet:
    """Return per-symbol sell quantities that fit inside the remaining exemption."""

    remaining = remaining_exemption(already_realized_gain, policy)
    items: List[SellRecommendation] = []

    for symbol, holding in portfolio.items():
        price_native = _usable_price(prices, symbol)
        if price_native is None:
            continue
        gain_per_share = price_native * exchange_rate - holding.average_cost
        if gain_per_share <= 0:
            continue
        max_for_exemption = (remaining / gain_per_share).to_integral_value(rounding=ROUND_FLOOR)
        quantity = min(holding.quantity, max_for_exemption)
        if quantity > 0:
            items.append(_recommendation(holding, quantity, price_native, exchange_rate))

    return AlternativeSet(
        strategy_name="Fill tax-free allowance (single symbol)",
        description=(
            f"Shares of each symbol that can be sold on their own to use the remaining "
            f"allowance of {remaining:,.0f} KRW. Options are alternatives, not an allocation."
        ),
        items=tuple(items),
        tax_summary=compute_tax_summary(already_realized_gain, policy),
        remaining_exemption=remaining,
    )


def build_target_amount_plan(
    portfolio: Mapping[str, HoldingSnapshot],
    prices: Mapping[str, Decimal],
    exchange_rate: Decimal,
    target_amount: Decimal,
    already_realized_gain: Decimal,
    policy: TaxPolicy = DEFAULT_POLICY,
) -> CombinedPlan:
    """Greedily raise ``target_amount`` selling the lowest gain ratios first.

    Holdings without a usable price, or worth nothing after conversion, are
    ignored here; callers reject the request up front when any holding is
    unpriced. The plan may fall short of the target when the priced holdings
    are not worth enough.
    """

    if target_amount <= 0:
        raise ValueError("target_amount must be > 0")

    candidates: List[_Candidate] = []
    for symbol, holding in portfolio.items():
        price_native = _usable_price(prices, symbol)
        if price_native is None or holding.quantity <= 0:
            continue
        price_home = price_native * exchange_rate
        if price_home <= 0:
            continue
        candidates.append(_Candidate(holding=holding, price_native=price_native, price_home=price_home))
    candidates.sort(key=lambda c: c.gain_ratio)

    chosen: Dict[str, Decimal] = {}
    proceeds = ZERO
    for candidate in candidates:
        if proceeds >= target_amount:
            break
        needed = target_amount - proceeds
        shares_needed = (needed / candidate.price_home).to_integral_value(rounding=ROUND_CEILING)
        quantity = min(candidate.holding.quantity, shares_needed)
        chosen[candidate.holding.symbol] = quantity
        proceeds += quantity * candidate.price_home

    items = tuple(
        _recommendation(c.holding, chosen[c.holding.symbol], c.price_native, exchange_rate)
        for c in candidates
        if c.holding.symbol in chosen
    )
    total_gain = sum((item.realized_gain_home for item in items), ZERO)
    total_proceeds = sum((item.proceeds_home for item in items), ZERO)

    return CombinedPlan(
        strategy_name=f"Raise target amount ({target_amount:,.0f} KRW)",
        description="Sells ordered to minimize tax: losses first, then lowest gain ratio.",
        items=items,
        tax_summary=compute_tax_summary(already_realized_gain + total_gain, policy),
        target_amount=target_amount,
        total_proceeds=total_proceeds,
        total_gain=total_gain,
    )


def unrealized_holdings(
    portfolio: Mapping[str, HoldingSnapshot],
    prices: Mapping[str, Decimal],
    exchange_rate: Decimal,
) -> List[UnrealizedHolding]:
    """Mark every holding to market; unpriced holdings are valued at zero."""

    rows: List[UnrealizedHolding] = []
    for symbol, holding in portfolio.items():
        price = _usable_price(prices, symbol) or ZERO
        market_value = price * exchange_rate * holding.quantity
        rows.append(
            UnrealizedHolding(
                symbol=symbol,
                quantity=holding.quantity,
                average_cost=holding.average_cost,
                current_price=price,
                market_value_home=market_value,
                unrealized_gain_home=market_value - holding.total_cost_basis,
            )
        )
    return rows


__all__ = [
    "UnrealizedHolding",
    "build_exemption_safe_plan",
    "build_target_amount_plan",
    "unrealized_holdings",
]
