"""Shared FastAPI dependencies for settings and outbound clients."""

from __future__ import annotations

from collections.abc import AsyncIterator
from decimal import Decimal

import httpx
from fastapi import Depends

from dividend_ledger.policy import TaxPolicy
from ledger_service.config import AppSettings, get_settings
from ledger_service.providers.exchange_rate import fetch_usd_krw_rate
from ledger_service.providers.finnhub import FinnhubClient


def get_app_settings() -> AppSettings:
    return get_settings()


def get_tax_policy(settings: AppSettings = Depends(get_app_settings)) -> TaxPolicy:
    return settings.tax_policy()


async def get_http_client(
    settings: AppSettings = Depends(get_app_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


def get_finnhub_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: AppSettings = Depends(get_app_settings),
) -> FinnhubClient:
    return FinnhubClient(
        settings.finnhub_api_key,
        max_concurrency=settings.finnhub_max_concurrency,
        timeout_seconds=settings.http_timeout_seconds,
        client=http_client,
    )


async def resolve_exchange_rate(
    requested: Decimal | None,
    http_client: httpx.AsyncClient,
) -> Decimal:
    """Use the caller's rate when given, otherwise look up the live one."""

    if requested is not None:
        return requested
    quote = await fetch_usd_krw_rate(client=http_client)
    return quote.rate


__all__ = [
    "get_app_settings",
    "get_finnhub_client",
    "get_http_client",
    "get_tax_policy",
    "resolve_exchange_rate",
]
