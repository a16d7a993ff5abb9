"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledger_service.api.routes import api_router
from ledger_service.config import AppSettings, get_settings
from ledger_service.core.logging import setup_logging
from ledger_service.core.telemetry import setup_telemetry

logger = logging.getLogger(__name__)


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the API with routes, CORS and optional telemetry attached."""

    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, version="0.1.0")
    setup_telemetry(app, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "x-request-id"],
    )

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now(ZoneInfo(settings.timezone)).isoformat(),
            "timezone": settings.timezone,
        }

    app.include_router(api_router)
    logger.info("Application configured: %s", settings.dict_for_logging())
    return app


setup_logging()
app = create_app()

__all__ = ["app", "create_app"]
