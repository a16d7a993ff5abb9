"""Transaction health check tests."""

from __future__ import annotations

from datetime import date

from dividend_ledger.health import IssueKind, find_data_issues


def test_flags_missing_exchange_rate_and_bad_sells(tx_factory):
    transactions = [
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 10, 100, fx=None, tx_id="t1"),
        tx_factory("AAPL", "SELL", date(2024, 2, 2), 15, 120, fx=1300, tx_id="t2"),
        tx_factory("TSLA", "SELL", date(2024, 2, 3), 1, 200, fx=1300, tx_id="t3"),
        tx_factory("MSFT", "BUY", date(2024, 2, 4), 0, 200, fx=1300, tx_id="t4"),
    ]
    issues = {(issue.record_id, issue.kind) for issue in find_data_issues(transactions)}
    assert issues == {
        ("t1", IssueKind.MISSING_EXCHANGE_RATE),
        ("t2", IssueKind.OVERSELL),
        ("t3", IssueKind.SELL_WITHOUT_POSITION),
        ("t4", IssueKind.NON_POSITIVE_QUANTITY),
    }


def test_clean_history_has_no_issues(tx_factory):
    transactions = [
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 10, 100, fx=1300),
        tx_factory("AAPL", "SELL", date(2024, 2, 2), 10, 120, fx=1310),
        tx_factory("외화-RP", "SELL", date(2024, 2, 2), 10, 1, fx=None),
    ]
    assert find_data_issues(transactions) == []


def test_domestic_records_need_no_exchange_rate(tx_factory):
    transactions = [tx_factory("삼성전자", "BUY", date(2024, 1, 2), 10, 70000, fx=None, country="KOR")]
    assert find_data_issues(transactions) == []
