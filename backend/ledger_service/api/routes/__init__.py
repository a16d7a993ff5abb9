"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .dividends import router as dividends_router
from .ledger import router as ledger_router
from .quotes import router as quotes_router

api_router = APIRouter()
api_router.include_router(ledger_router, prefix="/ledger", tags=["ledger"])
api_router.include_router(dividends_router, prefix="/dividends", tags=["dividends"])
api_router.include_router(quotes_router, prefix="/quotes", tags=["quotes"])

__all__ = ["api_router"]
