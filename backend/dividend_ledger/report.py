"""Tabular data behind the tax strategy report."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .models import USA, ZERO, CombinedPlan, RealizedGainYearSummary, StrategyPlan, TransactionRecord
from .policy import DEFAULT_POLICY, TaxPolicy
from .snapshot import UNASSIGNED_ACCOUNT, allocate_sell_by_account, holdings_by_account
from .tax import remaining_exemption

DISCLAIMER = (
    "This report is a simulation and may differ from the actual tax assessment. "
    "Consult a tax professional before filing."
)


@dataclass(frozen=True)
class ReportRow:
    symbol: str
    accounts: str
    sell_quantity: Decimal
    proceeds_home: Decimal
    realized_gain_home: Decimal
    exchange_rate: Decimal


@dataclass(frozen=True)
class TaxReport:
    generated_on: date
    year: int
    realized_gain_this_year: Decimal
    remaining_exemption: Decimal
    estimated_tax: Decimal
    strategy_name: str
    description: str
    rows: Tuple[ReportRow, ...]
    totals: Optional[ReportRow]
    disclaimer: str = DISCLAIMER


def _format_allocation(allocations: Iterable[Tuple[str, Decimal]]) -> str:
    parts = [f"{account}({quantity:,f})" for account, quantity in allocations]
    return ", ".join(parts) if parts else UNASSIGNED_ACCOUNT


def build_tax_report(
    plan: StrategyPlan,
    year_summary: RealizedGainYearSummary,
    transactions: Iterable[TransactionRecord],
    policy: TaxPolicy = DEFAULT_POLICY,
    *,
    today: Optional[date] = None,
    country: Optional[str] = USA,
) -> TaxReport:
    """Assemble the report for ``plan``; only a combined plan gets a totals row."""

    holdings = holdings_by_account(transactions, policy.is_excluded, country=country)
    rows = tuple(
        ReportRow(
            symbol=item.symbol,
            accounts=_format_allocation(
                allocate_sell_by_account(holdings, item.symbol, item.sell_quantity)
            ),
            sell_quantity=item.sell_quantity,
            proceeds_home=item.proceeds_home,
            realized_gain_home=item.realized_gain_home,
            exchange_rate=item.exchange_rate,
        )
        for item in plan.items
    )

    totals = None
    if isinstance(plan, CombinedPlan):
        totals = ReportRow(
            symbol="Total",
            accounts=UNASSIGNED_ACCOUNT,
            sell_quantity=sum((row.sell_quantity for row in rows), ZERO),
            proceeds_home=plan.total_proceeds,
            realized_gain_home=plan.total_gain,
            exchange_rate=ZERO,
        )

    return TaxReport(
        generated_on=today or date.today(),
        year=year_summary.year,
        realized_gain_this_year=year_summary.total_realized_gain,
        remaining_exemption=remaining_exemption(year_summary.total_realized_gain, policy),
        estimated_tax=plan.tax_summary.estimated_tax,
        strategy_name=plan.strategy_name,
        description=plan.description,
        rows=rows,
        totals=totals,
    )


__all__ = ["DISCLAIMER", "ReportRow", "TaxReport", "build_tax_report"]
