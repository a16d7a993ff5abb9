"""Weighted-average-cost inventory replay."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .models import USA, ZERO, Position, TradeType, TransactionRecord
from .policy import DEFAULT_POLICY, ExclusionPredicate

logger = logging.getLogger(__name__)

QUANTITY_EPSILON = Decimal("1e-9")


def _replay_key(tx: TransactionRecord) -> tuple:
    # Records without an explicit sequence keep their input order after sequenced ones.
    return (tx.date, tx.sequence is None, tx.sequence or 0)


def select_transactions(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> List[TransactionRecord]:
    """Return the records in scope, ordered for replay.

    ``country=None`` keeps every market; otherwise only records for that
    market are replayed so a caller can work one currency domain at a time.
    """

    excluded = is_excluded or DEFAULT_POLICY.is_excluded
    selected = [
        tx
        for tx in transactions
        if not excluded(tx.symbol)
        and (country is None or tx.country.upper() == country.upper())
    ]
    return sorted(selected, key=_replay_key)


def replay_transactions(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> List[TransactionRecord]:
    """Like :func:`select_transactions` but drops records with a non-positive quantity."""

    replayable: List[TransactionRecord] = []
    for tx in select_transactions(transactions, is_excluded, country=country):
        if tx.quantity <= 0:
            logger.warning(
                "Skipping %s %s of %s on %s: quantity %s is not positive",
                tx.trade_type.value,
                tx.id,
                tx.symbol,
                tx.date,
                tx.quantity,
            )
            continue
        replayable.append(tx)
    return replayable


def apply_buy(position: Position, tx: TransactionRecord) -> None:
    if tx.is_foreign and not tx.exchange_rate:
        logger.debug("Buy %s on %s has no exchange rate; cost counted as zero", tx.id, tx.date)
    position.quantity += tx.quantity
    position.total_cost_basis += tx.cost_native * tx.conversion_rate


def apply_sell(position: Position, tx: TransactionRecord) -> Optional[Decimal]:
    """Remove sold shares at the current average cost.

    Returns the cost basis consumed, or ``None`` when nothing was held and the
    sell was skipped.
    """

    if position.quantity <= 0:
        logger.warning(
            "Skipping sell %s of %s on %s: no shares held", tx.id, tx.symbol, tx.date
        )
        return None
    if tx.quantity > position.quantity:
        logger.warning(
            "Sell %s of %s on %s exceeds held quantity (%s > %s); clamping position",
            tx.id,
            tx.symbol,
            tx.date,
            tx.quantity,
            position.quantity,
        )

    cost_of_sale = position.average_cost * tx.quantity
    position.quantity -= tx.quantity
    position.total_cost_basis -= cost_of_sale

    if position.quantity < QUANTITY_EPSILON:
        position.quantity = ZERO
        position.total_cost_basis = ZERO
    elif position.total_cost_basis < 0:
        position.total_cost_basis = ZERO
    return cost_of_sale


def compute_positions(
    transactions: Iterable[TransactionRecord],
    is_excluded: Optional[ExclusionPredicate] = None,
    *,
    country: Optional[str] = USA,
) -> Dict[str, Position]:
    """Replay buys and sells and return the symbols still held."""

    positions: Dict[str, Position] = {}
    for tx in replay_transactions(transactions, is_excluded, country=country):
        position = positions.setdefault(tx.symbol, Position(symbol=tx.symbol))
        if tx.trade_type == TradeType.BUY:
            apply_buy(position, tx)
        elif tx.trade_type == TradeType.SELL:
            apply_sell(position, tx)

    return {symbol: pos for symbol, pos in positions.items() if pos.quantity > 0}


__all__ = [
    "QUANTITY_EPSILON",
    "apply_buy",
    "apply_sell",
    "compute_positions",
    "replay_transactions",
    "select_transactions",
]
