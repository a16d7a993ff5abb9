"""Cost-basis and tax-lot accounting engine for the dividend ledger."""

from .gains import compute_realized_gains, summary_for_year
from .inventory import compute_positions
from .models import (
    AlternativeSet,
    CombinedPlan,
    Position,
    RealizedGainEvent,
    RealizedGainYearSummary,
    SellRecommendation,
    TaxSummary,
    TradeType,
    TransactionRecord,
)
from .policy import TaxPolicy
from .snapshot import HoldingSnapshot, current_portfolio
from .strategy import build_exemption_safe_plan, build_target_amount_plan

__all__ = [
    "AlternativeSet",
    "CombinedPlan",
    "HoldingSnapshot",
    "Position",
    "RealizedGainEvent",
    "RealizedGainYearSummary",
    "SellRecommendation",
    "TaxPolicy",
    "TaxSummary",
    "TradeType",
    "TransactionRecord",
    "build_exemption_safe_plan",
    "build_target_amount_plan",
    "compute_positions",
    "compute_realized_gains",
    "current_portfolio",
    "summary_for_year",
]
