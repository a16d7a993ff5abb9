"""Realized gain aggregation by calendar year."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .inventory import apply_buy, apply_sell, replay_transactions
from .models import (
    USA,
    ZERO,
    Position,
    RealizedGainEvent,
    RealizedGainYearSummary,
    TradeType,
    TransactionRecord,
)
from .policy import ExclusionPredicate


def compute_realized_events(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> List[RealizedGainEvent]:
    """Replay the history and emit one event per sell that had shares to sell."""

    positions: Dict[str, Position] = {}
    events: List[RealizedGainEvent] = []
    for tx in replay_transactions(transactions, is_excluded, country=country):
        position = positions.setdefault(tx.symbol, Position(symbol=tx.symbol))
        if tx.trade_type == TradeType.BUY:
            apply_buy(position, tx)
            continue
        if tx.trade_type != TradeType.SELL:
            continue

        cost_basis = apply_sell(position, tx)
        if cost_basis is None:
            continue
        rate = tx.conversion_rate
        proceeds = tx.proceeds_native * rate
        events.append(
            RealizedGainEvent(
                year=tx.date.year,
                symbol=tx.symbol,
                date=tx.date,
                sold_quantity=tx.quantity,
                unit_price_native=tx.unit_price,
                exchange_rate=rate,
                proceeds_home=proceeds,
                cost_basis_home=cost_basis,
                realized_gain_home=proceeds - cost_basis,
            )
        )
    return events


def compute_realized_gains(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> List[RealizedGainYearSummary]:
    """Group realized gain events by year, newest year first."""

    by_year: Dict[int, List[RealizedGainEvent]] = {}
    for event in compute_realized_events(transactions, is_excluded, country=country):
        by_year.setdefault(event.year, []).append(event)

    summaries = [
        RealizedGainYearSummary(
            year=year,
            total_realized_gain=sum((e.realized_gain_home for e in events), ZERO),
            total_proceeds=sum((e.proceeds_home for e in events), ZERO),
            events=tuple(events),
        )
        for year, events in by_year.items()
    ]
    summaries.sort(key=lambda s: s.year, reverse=True)
    return summaries


def summary_for_year(summaries: Sequence[RealizedGainYearSummary], year: int) -> RealizedGainYearSummary:
    """Return the summary for ``year`` or an empty one when nothing was sold."""

    for summary in summaries:
        if summary.year == year:
            return summary
    return RealizedGainYearSummary(year=year, total_realized_gain=ZERO, total_proceeds=ZERO)


__all__ = ["compute_realized_events", "compute_realized_gains", "summary_for_year"]
