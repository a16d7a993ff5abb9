"""Pydantic schemas for the cost-basis and tax planning endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dividend_ledger.models import USA, TradeType, TransactionRecord


class TransactionIn(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    symbol: str = Field(..., min_length=1, examples=["AAPL"])
    country: str = Field(default=USA, examples=["USA", "KOR"])
    date: date
    trade_type: TradeType = Field(..., description="BUY/SELL, or 매수/매도")
    quantity: Decimal
    unit_price: Decimal = Field(..., ge=0)
    gross_amount: Decimal | None = Field(
        default=None, description="Price x quantity in native currency; derived when omitted"
    )
    sell_amount: Decimal | None = Field(default=None, description="Explicit sell proceeds")
    exchange_rate: Decimal | None = Field(default=None, ge=0)
    account: str | None = Field(default=None, description="Account number")
    account_type: str | None = None
    sequence: int | None = Field(default=None, description="Tie-breaker for same-day records")

    @field_validator("trade_type", mode="before")
    @classmethod
    def _parse_trade_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return TradeType(value)
        return value

    def to_record(self) -> TransactionRecord:
        gross = self.gross_amount if self.gross_amount is not None else self.unit_price * self.quantity
        return TransactionRecord(
            id=self.id,
            symbol=self.symbol.strip(),
            country=self.country,
            date=self.date,
            trade_type=self.trade_type,
            quantity=self.quantity,
            unit_price=self.unit_price,
            gross_amount=gross,
            sell_amount=self.sell_amount,
            exchange_rate=self.exchange_rate,
            account=self.account,
            account_type=self.account_type,
            sequence=self.sequence,
        )


class LedgerRequest(BaseModel):
    transactions: list[TransactionIn]
    country: str | None = Field(default=USA, description="Market to replay; null replays every market")

    def records(self) -> list[TransactionRecord]:
        return [tx.to_record() for tx in self.transactions]


class PlanRequest(LedgerRequest):
    prices: dict[str, Decimal] = Field(default_factory=dict, description="Native-currency quotes")
    exchange_rate: Decimal | None = Field(default=None, gt=0, description="Current USD->KRW rate")
    year: int | None = Field(default=None, description="Tax year; defaults to the current year")


class TargetPlanRequest(PlanRequest):
    target_amount: Decimal = Field(..., description="Cash to raise in KRW")


class ReportRequest(PlanRequest):
    strategy: Literal["exemption", "target-amount"] = "exemption"
    target_amount: Decimal | None = None


class _FromEngine(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PositionSchema(_FromEngine):
    symbol: str
    quantity: float
    total_cost_basis: float
    average_cost: float


class RealizedGainEventSchema(_FromEngine):
    year: int
    symbol: str
    date: date
    sold_quantity: float
    unit_price_native: float
    exchange_rate: float
    proceeds_home: float
    cost_basis_home: float
    realized_gain_home: float


class RealizedGainYearSchema(_FromEngine):
    year: int
    total_realized_gain: float
    total_proceeds: float
    events: list[RealizedGainEventSchema]


class SellRecommendationSchema(_FromEngine):
    symbol: str
    sell_quantity: float
    price_native: float
    exchange_rate: float
    proceeds_home: float
    cost_basis_home: float
    realized_gain_home: float


class TaxSummarySchema(_FromEngine):
    total_gain: float
    exemption_used: float
    taxable_base: float
    estimated_tax: float


class StrategyPlanSchema(_FromEngine):
    kind: Literal["ALTERNATIVE_SET", "COMBINED_PLAN"]
    strategy_name: str
    description: str
    items: list[SellRecommendationSchema]
    tax_summary: TaxSummarySchema
    remaining_exemption: float | None = None
    target_amount: float | None = None
    total_proceeds: float | None = None
    total_gain: float | None = None
    exchange_rate: float
    unpriced_symbols: list[str] = Field(default_factory=list)


class UnrealizedHoldingSchema(_FromEngine):
    symbol: str
    quantity: float
    average_cost: float
    current_price: float
    market_value_home: float
    unrealized_gain_home: float


class DataIssueSchema(_FromEngine):
    record_id: str
    symbol: str
    kind: str
    message: str


class ReportRowSchema(_FromEngine):
    symbol: str
    accounts: str
    sell_quantity: float
    proceeds_home: float
    realized_gain_home: float
    exchange_rate: float


class TaxReportSchema(_FromEngine):
    generated_on: date
    year: int
    realized_gain_this_year: float
    remaining_exemption: float
    estimated_tax: float
    strategy_name: str
    description: str
    rows: list[ReportRowSchema]
    totals: ReportRowSchema | None = None
    disclaimer: str


__all__ = [
    "DataIssueSchema",
    "LedgerRequest",
    "PlanRequest",
    "PositionSchema",
    "RealizedGainEventSchema",
    "RealizedGainYearSchema",
    "ReportRequest",
    "SellRecommendationSchema",
    "StrategyPlanSchema",
    "TargetPlanRequest",
    "TaxReportSchema",
    "TaxSummarySchema",
    "TransactionIn",
    "UnrealizedHoldingSchema",
]
