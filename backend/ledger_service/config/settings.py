"""Application configuration and environment helpers."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dividend_ledger.policy import (
    DEFAULT_ANNUAL_EXEMPTION,
    DEFAULT_CAPITAL_GAINS_RATE,
    DEFAULT_DIVIDEND_WITHHOLDING_RATE,
    DEFAULT_EXCLUDED_SYMBOLS,
    TaxPolicy,
)

DEFAULT_TIMEZONE = "Asia/Seoul"
DEFAULT_BASE_CURRENCY = "KRW"


class AppSettings(BaseSettings):
    """Configuration options for the dividend ledger service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Dividend Ledger")
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    base_currency: str = Field(default=DEFAULT_BASE_CURRENCY)

    annual_exemption: Decimal = Field(
        default=DEFAULT_ANNUAL_EXEMPTION,
        description="Realized gain per calendar year that is not taxed.",
    )
    capital_gains_rate: Decimal = Field(default=DEFAULT_CAPITAL_GAINS_RATE, ge=0, le=1)
    dividend_withholding_rate: Decimal = Field(default=DEFAULT_DIVIDEND_WITHHOLDING_RATE, ge=0, le=1)
    excluded_symbols: list[str] = Field(default_factory=lambda: sorted(DEFAULT_EXCLUDED_SYMBOLS))

    finnhub_api_key: str | None = Field(default=None)
    finnhub_max_concurrency: int = Field(default=10, ge=1)
    fx_api_url: str = Field(default="https://api.exchangerate-api.com/v4/latest/USD")
    default_usd_krw_rate: Decimal = Field(default=Decimal("1470"), gt=0)
    http_timeout_seconds: float = Field(default=15.0, gt=0)

    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="dividend-ledger")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    def tax_policy(self) -> TaxPolicy:
        """Return the engine policy described by these settings."""

        return TaxPolicy(
            annual_exemption=self.annual_exemption,
            capital_gains_rate=self.capital_gains_rate,
            dividend_withholding_rate=self.dividend_withholding_rate,
            excluded_symbols=frozenset(self.excluded_symbols),
        )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"finnhub_api_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_TIMEZONE",
    "DEFAULT_BASE_CURRENCY",
    "get_settings",
]
