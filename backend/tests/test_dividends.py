"""Dividend row derivation tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from dividend_ledger.dividends import (
    AccountType,
    DividendRecord,
    dividend_summary,
    monthly_net_totals,
    recalculate_dividends,
)


def _record(record_id: str, on: date, name: str, qty: str, price: str, dps: str, tax_base: str) -> DividendRecord:
    return DividendRecord(
        id=record_id,
        date=on,
        stock_name=name,
        quantity=Decimal(qty),
        current_price=Decimal(price),
        dividend_per_share=Decimal(dps),
        tax_base=Decimal(tax_base),
    )


def build_records():
    return [
        _record("r3", date(2024, 2, 15), "TIGER 배당", "100", "10200", "55", "40"),
        _record("r1", date(2024, 1, 15), "TIGER 배당", "100", "10000", "50", "37"),
        _record("r2", date(2024, 1, 20), "KODEX 고배당", "50", "8000", "30", "25"),
    ]


def test_rows_are_sorted_and_taxed_with_floor():
    rows = recalculate_dividends(build_records())
    assert [row.record.id for row in rows] == ["r1", "r2", "r3"]
    first = rows[0]
    assert first.taxable_distribution == Decimal("3700")
    # 3700 * 0.154 = 569.8 -> 569
    assert first.tax_amount == Decimal("569")
    assert first.gross_distribution == Decimal("5000")
    assert first.total_net == Decimal("4431")


def test_changes_are_relative_to_previous_record_of_same_stock():
    rows = recalculate_dividends(build_records())
    by_id = {row.record.id: row for row in rows}
    assert by_id["r1"].price_change == Decimal("0")
    assert by_id["r2"].dividend_change == Decimal("0")
    assert by_id["r3"].price_change == Decimal("200")
    assert by_id["r3"].dividend_change == Decimal("5")


def test_tax_free_account_has_no_tax():
    rows = recalculate_dividends(build_records(), AccountType.TAX_FREE)
    assert all(row.taxable_distribution == 0 for row in rows)
    assert all(row.tax_amount == 0 for row in rows)
    assert rows[0].total_net == rows[0].gross_distribution


def test_monthly_totals_and_summary():
    rows = recalculate_dividends(build_records())
    totals = monthly_net_totals(rows)
    # Jan: 4431 + (1500 - floor(1250 * 0.154) = 1500 - 192)
    assert totals == {"2024-01": Decimal("5739"), "2024-02": Decimal("4884")}

    summary = dividend_summary(rows)
    assert summary.total_quantity == Decimal("250")
    assert summary.total_gross == Decimal("12000")
    assert summary.total_tax == Decimal("569") + Decimal("192") + Decimal("616")
    assert summary.average_price == Decimal("2420000") / Decimal("250")


def test_monthly_totals_empty():
    assert monthly_net_totals([]) == {}
