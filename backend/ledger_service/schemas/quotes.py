"""Schemas for live price and exchange rate lookups."""

from __future__ import annotations

from pydantic import BaseModel, Field


class QuotesResponse(BaseModel):
    prices: dict[str, float]
    unavailable: list[str] = Field(default_factory=list)


class ExchangeRateResponse(BaseModel):
    pair: str = Field(default="USD/KRW")
    rate: float
    is_fallback: bool


__all__ = ["ExchangeRateResponse", "QuotesResponse"]
