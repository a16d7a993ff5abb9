"""Derived fields for dividend receipt records."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from .models import ZERO
from .policy import DEFAULT_POLICY, TaxPolicy


class AccountType(str, Enum):
    GENERAL = "general"
    TAX_FREE = "tax-free"


@dataclass(frozen=True)
class DividendRecord:
    """A dividend receipt as entered by the user."""

    id: str
    date: date
    stock_name: str
    quantity: Decimal
    current_price: Decimal
    dividend_per_share: Decimal
    tax_base: Decimal = ZERO


@dataclass(frozen=True)
class DividendRow:
    record: DividendRecord
    taxable_distribution: Decimal
    tax_amount: Decimal
    price_change: Decimal
    dividend_change: Decimal
    gross_distribution: Decimal
    total_net: Decimal


@dataclass(frozen=True)
class DividendSummary:
    total_quantity: Decimal
    total_gross: Decimal
    total_taxable_distribution: Decimal
    total_tax: Decimal
    total_received: Decimal
    average_price: Decimal


def recalculate_dividends(
    records: Iterable[DividendRecord],
    account_type: AccountType = AccountType.GENERAL,
    policy: TaxPolicy = DEFAULT_POLICY,
) -> List[DividendRow]:
    """Sort records by date and derive tax and change columns for each row."""

    tax_free = account_type == AccountType.TAX_FREE
    last_seen: Dict[str, Tuple[Decimal, Decimal]] = {}
    rows: List[DividendRow] = []

    for record in sorted(records, key=lambda r: r.date):
        if tax_free:
            taxable = ZERO
            tax_amount = ZERO
        else:
            taxable = record.tax_base * record.quantity
            tax_amount = (taxable * policy.dividend_withholding_rate).to_integral_value(
                rounding=ROUND_FLOOR
            )

        price_change = ZERO
        dividend_change = ZERO
        previous = last_seen.get(record.stock_name)
        if previous is not None:
            price_change = record.current_price - previous[0]
            dividend_change = record.dividend_per_share - previous[1]
        last_seen[record.stock_name] = (record.current_price, record.dividend_per_share)

        gross = record.dividend_per_share * record.quantity
        rows.append(
            DividendRow(
                record=record,
                taxable_distribution=taxable,
                tax_amount=tax_amount,
                price_change=price_change,
                dividend_change=dividend_change,
                gross_distribution=gross,
                total_net=gross - tax_amount,
            )
        )
    return rows


def monthly_net_totals(rows: Sequence[DividendRow]) -> Dict[str, Decimal]:
    """Return the sum of net receipts per ``YYYY-MM`` month."""

    if not rows:
        return {}
    frame = pd.DataFrame(
        {
            "month": [row.record.date.strftime("%Y-%m") for row in rows],
            "total_net": [row.total_net for row in rows],
        }
    )
    grouped = frame.groupby("month", sort=True)["total_net"].agg(lambda s: sum(s, ZERO))
    return {month: Decimal(value) for month, value in grouped.items()}


def dividend_summary(rows: Sequence[DividendRow]) -> DividendSummary:
    total_quantity = sum((row.record.quantity for row in rows), ZERO)
    total_value = sum((row.record.current_price * row.record.quantity for row in rows), ZERO)
    total_gross = sum((row.gross_distribution for row in rows), ZERO)
    return DividendSummary(
        total_quantity=total_quantity,
        total_gross=total_gross,
        total_taxable_distribution=sum((row.taxable_distribution for row in rows), ZERO),
        total_tax=sum((row.tax_amount for row in rows), ZERO),
        total_received=sum((row.total_net for row in rows), ZERO),
        average_price=total_value / total_quantity if total_quantity > 0 else ZERO,
    )


__all__ = [
    "AccountType",
    "DividendRecord",
    "DividendRow",
    "DividendSummary",
    "dividend_summary",
    "monthly_net_totals",
    "recalculate_dividends",
]
