"""Pydantic schemas for dividend receipt processing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from dividend_ledger.dividends import AccountType, DividendRecord


class DividendIn(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    date: date
    stock_name: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., ge=0)
    current_price: Decimal = Field(default=Decimal("0"), ge=0)
    dividend_per_share: Decimal = Field(default=Decimal("0"), ge=0)
    tax_base: Decimal = Field(default=Decimal("0"), ge=0)

    def to_record(self) -> DividendRecord:
        return DividendRecord(
            id=self.id,
            date=self.date,
            stock_name=self.stock_name,
            quantity=self.quantity,
            current_price=self.current_price,
            dividend_per_share=self.dividend_per_share,
            tax_base=self.tax_base,
        )


class DividendRequest(BaseModel):
    account_type: AccountType = AccountType.GENERAL
    records: list[DividendIn]


class DividendRowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    stock_name: str
    quantity: float
    current_price: float
    dividend_per_share: float
    tax_base: float
    taxable_distribution: float
    tax_amount: float
    price_change: float
    dividend_change: float
    gross_distribution: float
    total_net: float


class DividendSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_quantity: float
    total_gross: float
    total_taxable_distribution: float
    total_tax: float
    total_received: float
    average_price: float


class DividendResponse(BaseModel):
    rows: list[DividendRowSchema]
    summary: DividendSummarySchema


class MonthlyTotalSchema(BaseModel):
    month: str = Field(..., examples=["2024-03"])
    total_net: float


__all__ = [
    "DividendIn",
    "DividendRequest",
    "DividendResponse",
    "DividendRowSchema",
    "DividendSummarySchema",
    "MonthlyTotalSchema",
]
