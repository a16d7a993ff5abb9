"""Data-quality checks over the transaction history.

The engine tolerates these conditions silently; this module reports them so
the records can be corrected.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .inventory import select_transactions
from .models import ZERO, TradeType, TransactionRecord
from .policy import DEFAULT_POLICY, TaxPolicy


class IssueKind(str, Enum):
    MISSING_EXCHANGE_RATE = "MISSING_EXCHANGE_RATE"
    SELL_WITHOUT_POSITION = "SELL_WITHOUT_POSITION"
    OVERSELL = "OVERSELL"
    NON_POSITIVE_QUANTITY = "NON_POSITIVE_QUANTITY"


@dataclass(frozen=True)
class DataIssue:
    record_id: str
    symbol: str
    kind: IssueKind
    message: str


def find_data_issues(
    transactions: Iterable[TransactionRecord],
    policy: TaxPolicy = DEFAULT_POLICY,
    *,
    country: Optional[str] = None,
) -> List[DataIssue]:
    """Return every record the tax replay would silently mis-handle."""

    issues: List[DataIssue] = []
    held: Dict[str, Decimal] = {}
    for tx in select_transactions(transactions, policy.is_excluded, country=country):
        if tx.quantity <= 0:
            issues.append(
                DataIssue(tx.id, tx.symbol, IssueKind.NON_POSITIVE_QUANTITY, f"quantity is {tx.quantity}")
            )
            continue
        if tx.is_foreign and not tx.exchange_rate:
            issues.append(
                DataIssue(
                    tx.id,
                    tx.symbol,
                    IssueKind.MISSING_EXCHANGE_RATE,
                    f"{tx.trade_type.value} on {tx.date.isoformat()} has no exchange rate",
                )
            )

        quantity = held.get(tx.symbol, ZERO)
        if tx.trade_type == TradeType.BUY:
            held[tx.symbol] = quantity + tx.quantity
            continue
        if quantity <= 0:
            issues.append(
                DataIssue(
                    tx.id,
                    tx.symbol,
                    IssueKind.SELL_WITHOUT_POSITION,
                    f"sell on {tx.date.isoformat()} with no shares held",
                )
            )
            continue
        if tx.quantity > quantity:
            issues.append(
                DataIssue(
                    tx.id,
                    tx.symbol,
                    IssueKind.OVERSELL,
                    f"sell of {tx.quantity} exceeds {quantity} held",
                )
            )
        held[tx.symbol] = max(ZERO, quantity - tx.quantity)
    return issues


__all__ = ["DataIssue", "IssueKind", "find_data_issues"]
