"""Finnhub quote client used for live US equity prices."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

import httpx

from ledger_service.config import get_settings
from ledger_service.core.telemetry import record_quote_lookup

BASE_URL = "https://finnhub.io/api/v1/quote"

logger = logging.getLogger(__name__)


class FinnhubError(RuntimeError):
    """Raised when the Finnhub client cannot be used at all."""


def clean_symbol(symbol: str) -> str:
    """Strip a trailing description such as ``SMH-반도체`` down to the ticker."""

    return symbol.split("-")[0].strip().upper()


class FinnhubClient:
    """Quote client that reports failures per symbol instead of raising."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        max_concurrency: int | None = None,
        timeout_seconds: float | None = None,
        client: Optional[Any] = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.finnhub_api_key
        self._max_concurrency = max_concurrency or settings.finnhub_max_concurrency
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_price(self, symbol: str) -> Decimal | None:
        """Return the current price for ``symbol`` or ``None`` when unavailable."""

        if not self._api_key:
            raise FinnhubError("Finnhub API key is not configured")
        price = await self._lookup(symbol)
        record_quote_lookup("ok" if price is not None else "unavailable")
        return price

    async def _lookup(self, symbol: str) -> Decimal | None:
        ticker = clean_symbol(symbol)
        params = {"symbol": ticker, "token": self._api_key}
        try:
            response = await self._client.get(BASE_URL, params=params, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch price for %s: %s", symbol, exc)
            return None
        if response.status_code >= 400:
            logger.warning("Finnhub error %s for %s", response.status_code, symbol)
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Finnhub returned invalid JSON for %s", symbol)
            return None

        current = payload.get("c") if isinstance(payload, dict) else None
        previous = payload.get("pc") if isinstance(payload, dict) else None
        if not current and not previous:
            logger.warning("Symbol %s might be invalid or has no data", ticker)
            return None
        try:
            return Decimal(str(current))
        except (InvalidOperation, TypeError):
            return None

    async def fetch_prices(self, symbols: Iterable[str]) -> dict[str, Decimal]:
        """Fetch many quotes concurrently, keeping only the ones that succeeded."""

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _one(symbol: str) -> tuple[str, Decimal | None]:
            async with semaphore:
                return symbol, await self.fetch_price(symbol)

        unique = list(dict.fromkeys(symbols))
        results = await asyncio.gather(*(_one(symbol) for symbol in unique))
        return {symbol: price for symbol, price in results if price is not None and price > 0}


__all__ = ["BASE_URL", "FinnhubClient", "FinnhubError", "clean_symbol"]
