"""Weighted-average inventory replay tests."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from dividend_ledger.inventory import compute_positions
from dividend_ledger.models import KOR
from dividend_ledger.snapshot import current_portfolio


def test_weighted_average_cost_after_partial_sell(tx_factory):
    transactions = [
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 10, 100),
        tx_factory("AAPL", "BUY", date(2024, 2, 1), 10, 200),
        tx_factory("AAPL", "SELL", date(2024, 3, 1), 5, 250),
    ]
    before_sell = compute_positions(transactions[:2])["AAPL"]
    assert before_sell.average_cost == Decimal("150")

    position = compute_positions(transactions)["AAPL"]
    assert position.quantity == Decimal("15")
    assert position.total_cost_basis == Decimal("2250")
    assert position.average_cost == Decimal("150")


def test_replay_sorts_by_date_regardless_of_input_order(tx_factory):
    buy = tx_factory("MSFT", "BUY", date(2024, 1, 2), 10, 100)
    sell = tx_factory("MSFT", "SELL", date(2024, 6, 1), 4, 120)
    forward = compute_positions([buy, sell])
    backward = compute_positions([sell, buy])
    assert forward == backward
    assert forward["MSFT"].quantity == Decimal("6")


def test_sell_without_holdings_is_skipped(tx_factory):
    transactions = [
        tx_factory("TSLA", "SELL", date(2024, 1, 2), 5, 100),
        tx_factory("TSLA", "BUY", date(2024, 1, 3), 2, 100),
    ]
    position = compute_positions(transactions)["TSLA"]
    assert position.quantity == Decimal("2")
    assert position.total_cost_basis == Decimal("200")


def test_oversell_clamps_position_to_zero(tx_factory):
    transactions = [
        tx_factory("NVDA", "BUY", date(2024, 1, 2), 3, 100),
        tx_factory("NVDA", "SELL", date(2024, 1, 5), 5, 120),
        tx_factory("QQQ", "BUY", date(2024, 1, 2), 1, 400),
    ]
    positions = compute_positions(transactions)
    assert "NVDA" not in positions
    assert positions["QQQ"].quantity == Decimal("1")


def test_full_liquidation_with_fractional_noise_is_dropped(tx_factory):
    transactions = [
        tx_factory("VOO", "BUY", date(2024, 1, 2), "0.1", 400),
        tx_factory("VOO", "BUY", date(2024, 1, 3), "0.2", 410),
        tx_factory("VOO", "SELL", date(2024, 2, 1), "0.3", 420),
    ]
    assert compute_positions(transactions) == {}


def test_excluded_symbol_never_appears(tx_factory):
    transactions = [
        tx_factory("외화-RP", "BUY", date(2024, 1, 2), 1000, 1),
        tx_factory("SCHD", "BUY", date(2024, 1, 2), 10, 80),
    ]
    assert set(compute_positions(transactions)) == {"SCHD"}
    custom = compute_positions(transactions, lambda symbol: symbol == "SCHD")
    assert set(custom) == {"외화-RP"}


def test_missing_exchange_rate_contributes_zero_cost(tx_factory):
    transactions = [tx_factory("O", "BUY", date(2024, 1, 2), 10, 50, fx=None)]
    position = compute_positions(transactions)["O"]
    assert position.quantity == Decimal("10")
    assert position.total_cost_basis == Decimal("0")
    assert position.average_cost == Decimal("0")


def test_country_filter_selects_currency_domain(tx_factory):
    transactions = [
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 1, 100, fx=1300),
        tx_factory("삼성전자", "BUY", date(2024, 1, 2), 10, 70000, fx=None, country=KOR),
    ]
    assert set(compute_positions(transactions)) == {"AAPL"}
    domestic = compute_positions(transactions, country=KOR)
    assert domestic["삼성전자"].total_cost_basis == Decimal("700000")
    assert set(compute_positions(transactions, country=None)) == {"AAPL", "삼성전자"}


def test_same_day_sequence_breaks_ties(tx_factory):
    sell = tx_factory("AMD", "SELL", date(2024, 1, 2), 5, 100, sequence=2)
    buy = tx_factory("AMD", "BUY", date(2024, 1, 2), 5, 100, sequence=1)
    assert compute_positions([sell, buy]) == {}


def test_same_day_records_without_sequence_keep_input_order(tx_factory):
    buy = tx_factory("AMD", "BUY", date(2024, 1, 2), 5, 100)
    sell = tx_factory("AMD", "SELL", date(2024, 1, 2), 5, 110)
    assert compute_positions([buy, sell]) == {}
    # the sell comes first and finds nothing held
    assert compute_positions([sell, buy])["AMD"].quantity == Decimal("5")


def test_non_positive_quantities_are_not_replayed(tx_factory, caplog):
    transactions = [
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 10, 100, fx=1000),
        tx_factory("AAPL", "SELL", date(2024, 1, 3), -5, 100, fx=1000),
        tx_factory("AAPL", "BUY", date(2024, 1, 4), 0, 100, fx=1000),
    ]
    with caplog.at_level(logging.WARNING, logger="dividend_ledger"):
        position = compute_positions(transactions)["AAPL"]
    assert position.quantity == Decimal("10")
    assert position.total_cost_basis == Decimal("1000000")
    assert sum("not positive" in r.getMessage() for r in caplog.records) == 2


def test_replay_is_idempotent(tx_factory):
    transactions = (
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 10, 100, fx=1300),
        tx_factory("AAPL", "SELL", date(2024, 2, 2), 3, 110, fx=1310),
    )
    assert compute_positions(transactions) == compute_positions(transactions)


def test_invariants_hold_for_mixed_history(tx_factory):
    transactions = [
        tx_factory("A", "BUY", date(2024, 1, 1), 7, 13),
        tx_factory("A", "SELL", date(2024, 1, 2), 3, 11),
        tx_factory("A", "SELL", date(2024, 1, 3), 9, 12),
        tx_factory("A", "BUY", date(2024, 1, 4), 2, 15),
        tx_factory("B", "SELL", date(2024, 1, 4), 2, 15),
        tx_factory("B", "BUY", date(2024, 1, 5), 3, 9),
        tx_factory("B", "SELL", date(2024, 1, 6), 1, 10),
    ]
    for position in compute_positions(transactions).values():
        assert position.quantity >= 0
        assert position.total_cost_basis >= 0


def test_current_portfolio_exposes_average_cost(tx_factory):
    transactions = [
        tx_factory("AAPL", "BUY", date(2024, 1, 2), 100, 10, fx=1300),
        tx_factory("AAPL", "SELL", date(2024, 3, 4), 50, 15, fx=1320, sell_amount=750),
        tx_factory("MSFT", "BUY", date(2024, 1, 2), 1, 300, fx=1300),
        tx_factory("MSFT", "SELL", date(2024, 1, 3), 1, 310, fx=1300),
    ]
    snapshot = current_portfolio(transactions)
    assert list(snapshot) == ["AAPL"]
    holding = snapshot["AAPL"]
    assert holding.quantity == Decimal("50")
    assert holding.total_cost_basis == Decimal("650000")
    assert holding.average_cost == Decimal("13000")
