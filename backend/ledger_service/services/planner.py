"""Input validation and orchestration around the sell-plan strategies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Sequence
from zoneinfo import ZoneInfo

from dividend_ledger.gains import compute_realized_gains, summary_for_year
from dividend_ledger.models import USA, RealizedGainYearSummary, StrategyPlan, TransactionRecord
from dividend_ledger.policy import TaxPolicy
from dividend_ledger.snapshot import HoldingSnapshot, current_portfolio
from dividend_ledger.strategy import (
    UnrealizedHolding,
    build_exemption_safe_plan,
    build_target_amount_plan,
    unrealized_holdings,
)
from ledger_service.core.telemetry import record_plan

logger = logging.getLogger(__name__)


class PlanValidationError(ValueError):
    """Raised when a strategy request is missing inputs the user must supply."""

    def __init__(self, message: str, symbols: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.symbols = list(symbols)


@dataclass(frozen=True)
class PlanningContext:
    portfolio: Mapping[str, HoldingSnapshot]
    year_summary: RealizedGainYearSummary


@dataclass(frozen=True)
class PlanOutcome:
    plan: StrategyPlan
    context: PlanningContext
    exchange_rate: Decimal
    unpriced_symbols: list[str] = field(default_factory=list)


def current_year(timezone: str) -> int:
    return datetime.now(ZoneInfo(timezone)).year


def unpriced_symbols(portfolio: Mapping[str, HoldingSnapshot], prices: Mapping[str, Decimal]) -> list[str]:
    missing: list[str] = []
    for symbol in portfolio:
        price = prices.get(symbol)
        if price is None or price <= 0:
            missing.append(symbol)
    return missing


def validate_prices(portfolio: Mapping[str, HoldingSnapshot], prices: Mapping[str, Decimal]) -> None:
    missing = unpriced_symbols(portfolio, prices)
    if missing:
        raise PlanValidationError(
            f"Current price (USD) is missing for: {', '.join(missing)}",
            symbols=missing,
        )


def validate_target_amount(amount: Decimal | None) -> Decimal:
    if amount is None or amount <= 0:
        raise PlanValidationError("Target sell amount must be greater than zero")
    return amount


def prepare_context(
    transactions: Sequence[TransactionRecord],
    policy: TaxPolicy,
    *,
    year: int,
    country: str | None = USA,
) -> PlanningContext:
    portfolio = current_portfolio(transactions, policy.is_excluded, country=country)
    summaries = compute_realized_gains(transactions, policy.is_excluded, country=country)
    return PlanningContext(portfolio=portfolio, year_summary=summary_for_year(summaries, year))


def run_exemption_strategy(
    transactions: Sequence[TransactionRecord],
    prices: Mapping[str, Decimal],
    exchange_rate: Decimal,
    policy: TaxPolicy,
    *,
    year: int,
    country: str | None = USA,
) -> PlanOutcome:
    """Build the exemption-fill alternatives; unpriced holdings are skipped and reported."""

    context = prepare_context(transactions, policy, year=year, country=country)
    missing = unpriced_symbols(context.portfolio, prices)
    if missing:
        logger.info("Exemption plan skipping unpriced symbols: %s", ", ".join(missing))
    plan = build_exemption_safe_plan(
        context.portfolio,
        prices,
        exchange_rate,
        context.year_summary.total_realized_gain,
        policy,
    )
    record_plan(plan.kind.value, len(plan.items))
    return PlanOutcome(plan=plan, context=context, exchange_rate=exchange_rate, unpriced_symbols=missing)


def run_target_strategy(
    transactions: Sequence[TransactionRecord],
    prices: Mapping[str, Decimal],
    exchange_rate: Decimal,
    target_amount: Decimal | None,
    policy: TaxPolicy,
    *,
    year: int,
    country: str | None = USA,
) -> PlanOutcome:
    """Build the target-amount plan after rejecting incomplete input."""

    amount = validate_target_amount(target_amount)
    context = prepare_context(transactions, policy, year=year, country=country)
    validate_prices(context.portfolio, prices)
    plan = build_target_amount_plan(
        context.portfolio,
        prices,
        exchange_rate,
        amount,
        context.year_summary.total_realized_gain,
        policy,
    )
    record_plan(plan.kind.value, len(plan.items))
    return PlanOutcome(plan=plan, context=context, exchange_rate=exchange_rate)


def run_unrealized(
    transactions: Sequence[TransactionRecord],
    prices: Mapping[str, Decimal],
    exchange_rate: Decimal,
    policy: TaxPolicy,
    *,
    country: str | None = USA,
) -> list[UnrealizedHolding]:
    portfolio = current_portfolio(transactions, policy.is_excluded, country=country)
    return unrealized_holdings(portfolio, prices, exchange_rate)


__all__ = [
    "PlanOutcome",
    "PlanValidationError",
    "PlanningContext",
    "current_year",
    "prepare_context",
    "run_exemption_strategy",
    "run_target_strategy",
    "run_unrealized",
    "unpriced_symbols",
    "validate_prices",
    "validate_target_amount",
]
