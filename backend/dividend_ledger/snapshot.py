"""Read-only view of current holdings derived from the inventory replay."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .inventory import compute_positions, replay_transactions
from .models import USA, ZERO, TradeType, TransactionRecord
from .policy import ExclusionPredicate

UNASSIGNED_ACCOUNT = "-"


@dataclass(frozen=True)
class HoldingSnapshot:
    symbol: str
    quantity: Decimal
    total_cost_basis: Decimal
    average_cost: Decimal


def current_portfolio(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> Dict[str, HoldingSnapshot]:
    """Return held symbols with their average cost, recomputed on every call."""

    positions = compute_positions(transactions, is_excluded, country=country)
    return {
        symbol: HoldingSnapshot(
            symbol=symbol,
            quantity=position.quantity,
            total_cost_basis=position.total_cost_basis,
            average_cost=position.average_cost,
        )
        for symbol, position in sorted(positions.items())
        if position.quantity > 0
    }


def holdings_by_account(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> Dict[str, Dict[str, Decimal]]:
    """Return held quantity per symbol and account number."""

    holdings: Dict[str, Dict[str, Decimal]] = {}
    for tx in replay_transactions(transactions, is_excluded, country=country):
        accounts = holdings.setdefault(tx.symbol, {})
        account = tx.account or UNASSIGNED_ACCOUNT
        held = accounts.get(account, ZERO)
        if tx.trade_type == TradeType.BUY:
            accounts[account] = held + tx.quantity
        elif tx.trade_type == TradeType.SELL:
            accounts[account] = max(ZERO, held - tx.quantity)

    return {
        symbol: {account: qty for account, qty in accounts.items() if qty > 0}
        for symbol, accounts in holdings.items()
        if any(qty > 0 for qty in accounts.values())
    }


def allocate_sell_by_account(
    holdings: Mapping[str, Mapping[str, Decimal]],
    symbol: str,
    sell_quantity: Decimal,
) -> List[Tuple[str, Decimal]]:
    """Split a sell across the accounts holding ``symbol``, largest first."""

    accounts = holdings.get(symbol, {})
    remaining = sell_quantity
    allocations: List[Tuple[str, Decimal]] = []
    for account, held in sorted(accounts.items(), key=lambda item: item[1], reverse=True):
        if remaining <= 0:
            break
        take = min(held, remaining)
        allocations.append((account, take))
        remaining -= take
    return allocations


__all__ = [
    "HoldingSnapshot",
    "UNASSIGNED_ACCOUNT",
    "allocate_sell_by_account",
    "current_portfolio",
    "holdings_by_account",
]
