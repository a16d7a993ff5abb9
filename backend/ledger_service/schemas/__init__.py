"""Pydantic schemas exposed by the dividend ledger API."""

from .dividends import (
    DividendIn,
    DividendRequest,
    DividendResponse,
    DividendRowSchema,
    DividendSummarySchema,
    MonthlyTotalSchema,
)
from .ledger import (
    DataIssueSchema,
    LedgerRequest,
    PlanRequest,
    PositionSchema,
    RealizedGainEventSchema,
    RealizedGainYearSchema,
    ReportRequest,
    SellRecommendationSchema,
    StrategyPlanSchema,
    TargetPlanRequest,
    TaxReportSchema,
    TaxSummarySchema,
    TransactionIn,
    UnrealizedHoldingSchema,
)
from .quotes import ExchangeRateResponse, QuotesResponse

__all__ = [
    "DataIssueSchema",
    "DividendIn",
    "DividendRequest",
    "DividendResponse",
    "DividendRowSchema",
    "DividendSummarySchema",
    "ExchangeRateResponse",
    "LedgerRequest",
    "MonthlyTotalSchema",
    "PlanRequest",
    "PositionSchema",
    "QuotesResponse",
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
