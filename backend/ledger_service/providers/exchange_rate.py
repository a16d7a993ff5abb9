"""Current USD/KRW exchange rate lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from ledger_service.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeRateQuote:
    rate: Decimal
    is_fallback: bool = False


async def fetch_usd_krw_rate(
    *,
    url: str | None = None,
    client: Optional[Any] = None,
) -> ExchangeRateQuote:
    """Return the live USD->KRW rate, falling back to the configured default."""

    settings = get_settings()
    fallback = ExchangeRateQuote(rate=settings.default_usd_krw_rate, is_fallback=True)
    target = url or settings.fx_api_url
    try:
        if client is not None:
            response = await client.get(target, timeout=settings.http_timeout_seconds)
        else:
            async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http:
                response = await http.get(target)
    except httpx.HTTPError as exc:
        logger.warning("Exchange rate lookup failed, using default %s: %s", fallback.rate, exc)
        return fallback

    if response.status_code >= 400:
        logger.warning("Exchange rate service error %s, using default", response.status_code)
        return fallback
    try:
        payload = response.json()
        rate = Decimal(str(payload["rates"]["KRW"]))
    except (ValueError, KeyError, TypeError, InvalidOperation):
        logger.warning("Exchange rate payload missing KRW rate, using default")
        return fallback
    if rate <= 0:
        return fallback
    return ExchangeRateQuote(rate=rate)


__all__ = ["ExchangeRateQuote", "fetch_usd_krw_rate"]
