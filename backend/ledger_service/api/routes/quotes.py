"""Live price and FX lookups for the strategy simulator."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ledger_service.api.dependencies.providers import get_finnhub_client, get_http_client
from ledger_service.providers.exchange_rate import fetch_usd_krw_rate
from ledger_service.providers.finnhub import FinnhubClient, FinnhubError
from ledger_service.schemas import ExchangeRateResponse, QuotesResponse

router = APIRouter()


@router.get("", response_model=QuotesResponse)
async def get_quotes(
    symbols: list[str] = Query(..., min_length=1),
    client: FinnhubClient = Depends(get_finnhub_client),
) -> QuotesResponse:
    """Return the prices that could be fetched and list the rest as unavailable."""

    try:
        prices = await client.fetch_prices(symbols)
    except FinnhubError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    unavailable = [symbol for symbol in dict.fromkeys(symbols) if symbol not in prices]
    return QuotesResponse(prices={k: float(v) for k, v in prices.items()}, unavailable=unavailable)


@router.get("/fx", response_model=ExchangeRateResponse)
async def get_exchange_rate(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> ExchangeRateResponse:
    quote = await fetch_usd_krw_rate(client=http_client)
    return ExchangeRateResponse(rate=float(quote.rate), is_fallback=quote.is_fallback)


__all__ = ["router"]
