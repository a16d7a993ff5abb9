"""Domain models used by the dividend ledger tax engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

USA = "USA"
KOR = "KOR"

ZERO = Decimal("0")


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def _missing_(cls, value: object) -> "TradeType | None":
        if not isinstance(value, str):
            return None
        label = value.strip()
        if label == "매수":
            return cls.BUY
        if label == "매도":
            return cls.SELL
        upper = label.upper()
        for member in cls:
            if member.value == upper:
                return member
        return None


class PlanKind(str, Enum):
    ALTERNATIVE_SET = "ALTERNATIVE_SET"
    COMBINED_PLAN = "COMBINED_PLAN"


@dataclass(frozen=True)
class TransactionRecord:
    """A single buy or sell as entered by the user."""

    id: str
    symbol: str
    country: str
    date: date
    trade_type: TradeType
    quantity: Decimal
    unit_price: Decimal
    gross_amount: Decimal
    sell_amount: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    account: Optional[str] = None
    account_type: Optional[str] = None
    sequence: Optional[int] = None

    @property
    def is_foreign(self) -> bool:
        return self.country.upper() == USA

    @property
    def conversion_rate(self) -> Decimal:
        """Rate into the home currency; zero when a foreign record lacks one."""

        if not self.is_foreign:
            return Decimal("1")
        return self.exchange_rate or ZERO

    @property
    def cost_native(self) -> Decimal:
        return self.gross_amount or self.unit_price * self.quantity

    @property
    def proceeds_native(self) -> Decimal:
        """Sell proceeds, preferring the explicit sell amount when supplied."""

        if self.sell_amount:
            return self.sell_amount
        return self.unit_price * self.quantity


@dataclass
class Position:
    """Running weighted-average position for one symbol."""

    symbol: str
    quantity: Decimal = ZERO
    total_cost_basis: Decimal = ZERO

    @property
    def average_cost(self) -> Decimal:
        if self.quantity <= 0:
            return ZERO
        return self.total_cost_basis / self.quantity


@dataclass(frozen=True)
class RealizedGainEvent:
    year: int
    symbol: str
    date: date
    sold_quantity: Decimal
    unit_price_native: Decimal
    exchange_rate: Decimal
    proceeds_home: Decimal
    cost_basis_home: Decimal
    realized_gain_home: Decimal


@dataclass(frozen=True)
class RealizedGainYearSummary:
    year: int
    total_realized_gain: Decimal
    total_proceeds: Decimal
    events: Tuple[RealizedGainEvent, ...] = ()


@dataclass(frozen=True)
class SellRecommendation:
    symbol: str
    sell_quantity: Decimal
    price_native: Decimal
    exchange_rate: Decimal
    proceeds_home: Decimal
    cost_basis_home: Decimal
    realized_gain_home: Decimal


@dataclass(frozen=True)
class TaxSummary:
    total_gain: Decimal
    exemption_used: Decimal
    taxable_base: Decimal
    estimated_tax: Decimal


@dataclass(frozen=True)
class StrategyPlan:
    """Common shape of every sell plan."""

    strategy_name: str
    description: str
    items: Tuple[SellRecommendation, ...]
    tax_summary: TaxSummary
    kind: PlanKind = field(init=False)


@dataclass(frozen=True)
class AlternativeSet(StrategyPlan):
    """Mutually exclusive per-symbol options; items must not be summed."""

    remaining_exemption: Decimal = ZERO
    kind: PlanKind = field(init=False, default=PlanKind.ALTERNATIVE_SET)


@dataclass(frozen=True)
class CombinedPlan(StrategyPlan):
    """A single executable set of sells."""

    target_amount: Decimal = ZERO
    total_proceeds: Decimal = ZERO
    total_gain: Decimal = ZERO
    kind: PlanKind = field(init=False, default=PlanKind.COMBINED_PLAN)

    @property
    def fully_funded(self) -> bool:
        return self.total_proceeds >= self.target_amount


__all__ = [
    "USA",
    "KOR",
    "TradeType",
    "PlanKind",
    "TransactionRecord",
    "Position",
    "RealizedGainEvent",
    "RealizedGainYearSummary",
    "SellRecommendation",
    "TaxSummary",
    "StrategyPlan",
    "AlternativeSet",
    "CombinedPlan",
]
