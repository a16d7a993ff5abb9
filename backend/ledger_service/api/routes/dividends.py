"""Dividend receipt recalculation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dividend_ledger.dividends import dividend_summary, monthly_net_totals, recalculate_dividends
from dividend_ledger.policy import TaxPolicy
from ledger_service.api.dependencies.providers import get_tax_policy
from ledger_service.schemas import (
    DividendRequest,
    DividendResponse,
    DividendRowSchema,
    DividendSummarySchema,
    MonthlyTotalSchema,
)

router = APIRouter()


@router.post("/recalculate", response_model=DividendResponse)
async def post_recalculate(
    request: DividendRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
) -> DividendResponse:
    rows = recalculate_dividends([r.to_record() for r in request.records], request.account_type, policy)
    return DividendResponse(
        rows=[
            DividendRowSchema(
                id=row.record.id,
                date=row.record.date,
                stock_name=row.record.stock_name,
                quantity=row.record.quantity,
                current_price=row.record.current_price,
                dividend_per_share=row.record.dividend_per_share,
                tax_base=row.record.tax_base,
                taxable_distribution=row.taxable_distribution,
                tax_amount=row.tax_amount,
                price_change=row.price_change,
                dividend_change=row.dividend_change,
                gross_distribution=row.gross_distribution,
                total_net=row.total_net,
            )
            for row in rows
        ],
        summary=DividendSummarySchema.model_validate(dividend_summary(rows)),
    )


@router.post("/monthly", response_model=list[MonthlyTotalSchema])
async def post_monthly(
    request: DividendRequest,
    policy: TaxPolicy = Depends(get_tax_policy),
) -> list[MonthlyTotalSchema]:
    rows = recalculate_dividends([r.to_record() for r in request.records], request.account_type, policy)
    totals = monthly_net_totals(rows)
    return [MonthlyTotalSchema(month=month, total_net=value) for month, value in totals.items()]


__all__ = ["router"]
