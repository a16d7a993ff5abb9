"""Cost-basis, realized gain and sell-plan endpoints."""

from __future__ import annotations

from decimal import Decimal

import httpx
from fastapi import APIRouter, Depends, HTTPException

from dividend_ledger.gains import compute_realized_gains
from dividend_ledger.health import find_data_issues
from dividend_ledger.inventory import compute_positions
from dividend_ledger.policy import TaxPolicy
from dividend_ledger.report import build_tax_report
from ledger_service.api.dependencies.providers import (
    get_app_settings,
    get_http_client,
    get_tax_policy,
    resolve_exchange_rate,
)
from ledger_service.config import AppSettings
from ledger_service.schemas import (
    DataIssueSchema,
    LedgerRequest,
    PlanRequest,
    PositionSchema,
    RealizedGainYearSchema,
    ReportRequest,
    SellRecommendationSchema,
    StrategyPlanSchema,
    TargetPlanRequest,
    TaxReportSchema,
    TaxSummarySchema,
    UnrealizedHoldingSchema,
)
from ledger_service.services.planner import (
    PlanOutcome,
    PlanValidationError,
    current_year,
    run_exemption_strategy,
    run_target_strategy,
    run_unrealized,
)

router = APIRouter()


def _validation_error(exc: PlanValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": exc.message, "symbols": exc.symbols},
    )


def _plan_schema(outcome: PlanOutcome) -> StrategyPlanSchema:
    plan = outcome.plan
    return StrategyPlanSchema(
        kind=plan.kind.value,
        strategy_name=plan.strategy_name,
        description=plan.description,
        items=[SellRecommendationSchema.model_validate(item) for item in plan.items],
        tax_summary=TaxSummarySchema.model_validate(plan.tax_summary),
        remaining_exemption=getattr(plan, "remaining_exemption", None),
        target_amount=getattr(plan, "target_amount", None),
        total_proceeds=getattr(plan, "total_proceeds", None),
        total_gain=getattr(plan, "total_gain", None),
        exchange_rate=outcome.exchange_rate,
        unpriced_symbols=outcome.unpriced_symbols,
    )


async def _run_plan(
    request: PlanRequest,
    target_amount: Decimal | None,
    *,
    target: bool,
    policy: TaxPolicy,
    settings: AppSettings,
    http_client: httpx.AsyncClient,
) -> PlanOutcome:
    exchange_rate = await resolve_exchange_rate(request.exchange_rate, http_client)
    year = request.year or current_year(settings.timezone)
    try:
        if target:
            return run_target_strategy(
                request.records(),
                request.prices,
                exchange_rate,
                target_amount,
                policy,
                year=year,
                country=request.country,
            )
        return run_exemption_strategy(
            request.records(),
            request.prices,
            exchange_rate,
            policy,
            year=year,
            country=request.country,
        )
    except PlanValidationError as exc:
        raise _validation_error(exc) from exc


@router.post("/positions", response_model=list[PositionSchema])
async def post_positions(
    request: LedgerRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
) -> list[PositionSchema]:
    positions = compute_positions(request.records(), policy.is_excluded, country=request.country)
    return [
        PositionSchema(
            symbol=symbol,
            quantity=position.quantity,
            total_cost_basis=position.total_cost_basis,
            average_cost=position.average_cost,
        )
        for symbol, position in sorted(positions.items())
    ]


@router.post("/realized-gains", response_model=list[RealizedGainYearSchema])
async def post_realized_gains(
    request: LedgerRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
) -> list[RealizedGainYearSchema]:
    summaries = compute_realized_gains(request.records(), policy.is_excluded, country=request.country)
    return [RealizedGainYearSchema.model_validate(summary) for summary in summaries]


@router.post("/health-check", response_model=list[DataIssueSchema])
async def post_health_check(
    request: LedgerRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
) -> list[DataIssueSchema]:
    issues = find_data_issues(request.records(), policy, country=request.country)
    return [
        DataIssueSchema(record_id=i.record_id, symbol=i.symbol, kind=i.kind.value, message=i.message)
        for i in issues
    ]


@router.post("/strategies/exemption", response_model=StrategyPlanSchema)
async def post_exemption_strategy(
    request: PlanRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
    settings: AppSettings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> StrategyPlanSchema:
    outcome = await _run_plan(
        request, None, target=False, policy=policy, settings=settings, http_client=http_client
    )
    return _plan_schema(outcome)


@router.post("/strategies/target-amount", response_model=StrategyPlanSchema)
async def post_target_strategy(
    request: TargetPlanRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
    settings: AppSettings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> StrategyPlanSchema:
    outcome = await _run_plan(
        request,
        request.target_amount,
        target=True,
        policy=policy,
        settings=settings,
        http_client=http_client,
    )
    return _plan_schema(outcome)


@router.post("/unrealized", response_model=list[UnrealizedHoldingSchema])
async def post_unrealized(
    request: PlanRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> list[UnrealizedHoldingSchema]:
    """Mark every holding to market; unpriced holdings are valued at zero."""

    exchange_rate = await resolve_exchange_rate(request.exchange_rate, http_client)
    rows = run_unrealized(request.records(), request.prices, exchange_rate, policy, country=request.country)
    return [UnrealizedHoldingSchema.model_validate(row) for row in rows]


@router.post("/report", response_model=TaxReportSchema)
async def post_report(
    request: ReportRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
    settings: AppSettings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> TaxReportSchema:
    outcome = await _run_plan(
        request,
        request.target_amount,
        target=request.strategy == "target-amount",
        policy=policy,
        settings=settings,
        http_client=http_client,
    )
    report = build_tax_report(
        outcome.plan,
        outcome.context.year_summary,
        request.records(),
        policy,
        country=request.country,
    )
    return TaxReportSchema.model_validate(report)


__all__ = ["router"]
