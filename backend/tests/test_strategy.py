"""Sell-plan strategy tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from dividend_ledger.models import AlternativeSet, CombinedPlan, PlanKind
from dividend_ledger.policy import TaxPolicy
from dividend_ledger.snapshot import HoldingSnapshot
from dividend_ledger.strategy import (
    build_exemption_safe_plan,
    build_target_amount_plan,
    unrealized_holdings,
)


def _holding(symbol: str, quantity: str, average_cost: str) -> HoldingSnapshot:
    qty = Decimal(quantity)
    avg = Decimal(average_cost)
    return HoldingSnapshot(symbol=symbol, quantity=qty, total_cost_basis=qty * avg, average_cost=avg)


def test_exemption_fill_limited_by_exemption():
    portfolio = {"AAPL": _holding("AAPL", "3000", "1000")}
    # price 2 USD at 1000 KRW => 2000 KRW, gain 1000 per share
    plan = build_exemption_safe_plan(portfolio, {"AAPL": Decimal("2")}, Decimal("1000"), Decimal("0"))
    assert isinstance(plan, AlternativeSet)
    assert plan.kind == PlanKind.ALTERNATIVE_SET
    assert plan.remaining_exemption == Decimal("2500000")
    (item,) = plan.items
    assert item.sell_quantity == Decimal("2500")
    assert item.realized_gain_home == Decimal("2500000")


def test_exemption_fill_limited_by_holdings():
    portfolio = {"AAPL": _holding("AAPL", "2000", "1000")}
    plan = build_exemption_safe_plan(portfolio, {"AAPL": Decimal("2")}, Decimal("1000"), Decimal("0"))
    assert plan.items[0].sell_quantity == Decimal("2000")


def test_exemption_fill_skips_losses_unpriced_and_exhausted_allowance():
    portfolio = {
        "LOSS": _holding("LOSS", "10", "5000"),
        "NOPRICE": _holding("NOPRICE", "10", "100"),
        "GAIN": _holding("GAIN", "10", "100"),
    }
    prices = {"LOSS": Decimal("1"), "GAIN": Decimal("2")}
    plan = build_exemption_safe_plan(portfolio, prices, Decimal("1000"), Decimal("0"))
    assert [item.symbol for item in plan.items] == ["GAIN"]

    exhausted = build_exemption_safe_plan(portfolio, prices, Decimal("1000"), Decimal("3000000"))
    assert exhausted.items == ()
    assert exhausted.remaining_exemption == Decimal("0")
    assert exhausted.tax_summary.taxable_base == Decimal("500000")


def test_exemption_items_are_independent_alternatives():
    portfolio = {
        "A": _holding("A", "10000", "1000"),
        "B": _holding("B", "10000", "1000"),
    }
    prices = {"A": Decimal("2"), "B": Decimal("3")}
    plan = build_exemption_safe_plan(portfolio, prices, Decimal("1000"), Decimal("500000"))
    quantities = {item.symbol: item.sell_quantity for item in plan.items}
    # each option alone uses the full remaining 2,000,000
    assert quantities == {"A": Decimal("2000"), "B": Decimal("1000")}
    assert not hasattr(plan, "total_proceeds")


def test_target_amount_prefers_loss_positions():
    portfolio = {
        "GAIN": _holding("GAIN", "100", "1000"),
        "LOSS": _holding("LOSS", "100", "3000"),
    }
    prices = {"GAIN": Decimal("2"), "LOSS": Decimal("2")}
    plan = build_target_amount_plan(
        portfolio, prices, Decimal("1000"), Decimal("100000"), Decimal("0")
    )
    assert isinstance(plan, CombinedPlan)
    assert plan.kind == PlanKind.COMBINED_PLAN
    assert [item.symbol for item in plan.items] == ["LOSS"]
    assert plan.items[0].sell_quantity == Decimal("50")
    assert plan.total_proceeds == Decimal("100000")
    assert plan.total_gain == Decimal("-50000")
    assert plan.fully_funded


def test_target_amount_orders_by_gain_ratio_and_spills_over():
    portfolio = {
        "HIGH": _holding("HIGH", "100", "100"),
        "LOW": _holding("LOW", "10", "900"),
    }
    prices = {"HIGH": Decimal("1"), "LOW": Decimal("1")}
    plan = build_target_amount_plan(portfolio, prices, Decimal("1000"), Decimal("15000"), Decimal("0"))
    assert [(i.symbol, i.sell_quantity) for i in plan.items] == [
        ("LOW", Decimal("10")),
        ("HIGH", Decimal("5")),
    ]
    assert plan.total_proceeds == Decimal("15000")


def test_target_amount_rounds_shares_up():
    portfolio = {"X": _holding("X", "100", "1000")}
    plan = build_target_amount_plan(
        portfolio, {"X": Decimal("1.5")}, Decimal("1000"), Decimal("2000"), Decimal("0")
    )
    assert plan.items[0].sell_quantity == Decimal("2")
    assert plan.total_proceeds == Decimal("3000")


def test_target_amount_tolerates_underfill():
    portfolio = {"X": _holding("X", "3", "1000")}
    plan = build_target_amount_plan(
        portfolio, {"X": Decimal("2")}, Decimal("1000"), Decimal("1000000"), Decimal("0")
    )
    assert plan.items[0].sell_quantity == Decimal("3")
    assert plan.total_proceeds == Decimal("6000")
    assert not plan.fully_funded


def test_target_amount_tax_computation():
    portfolio = {"X": _holding("X", "1000", "1000")}
    plan = build_target_amount_plan(
        portfolio,
        {"X": Decimal("2")},
        Decimal("1000"),
        Decimal("2000000"),
        Decimal("2000000"),
        TaxPolicy(annual_exemption=Decimal("2500000"), capital_gains_rate=Decimal("0.22")),
    )
    assert plan.total_gain == Decimal("1000000")
    assert plan.tax_summary.total_gain == Decimal("3000000")
    assert plan.tax_summary.taxable_base == Decimal("500000")
    assert plan.tax_summary.estimated_tax == Decimal("110000")
    assert plan.tax_summary.exemption_used == Decimal("2500000")


def test_target_amount_ignores_holdings_worth_nothing_after_conversion():
    portfolio = {"X": _holding("X", "10", "1000")}
    plan = build_target_amount_plan(portfolio, {"X": Decimal("2")}, Decimal("0"), Decimal("1000"), Decimal("0"))
    assert plan.items == ()
    assert not plan.fully_funded


def test_target_amount_rejects_non_positive_target():
    with pytest.raises(ValueError):
        build_target_amount_plan({}, {}, Decimal("1000"), Decimal("0"), Decimal("0"))


def test_policy_override_changes_exemption():
    portfolio = {"AAPL": _holding("AAPL", "10000", "1000")}
    policy = TaxPolicy(annual_exemption=Decimal("1000000"))
    plan = build_exemption_safe_plan(portfolio, {"AAPL": Decimal("2")}, Decimal("1000"), Decimal("0"), policy)
    assert plan.items[0].sell_quantity == Decimal("1000")


def test_unrealized_holdings_marks_to_market():
    portfolio = {"A": _holding("A", "10", "1000"), "B": _holding("B", "5", "2000")}
    rows = {row.symbol: row for row in unrealized_holdings(portfolio, {"A": Decimal("1.5")}, Decimal("1000"))}
    assert rows["A"].market_value_home == Decimal("15000")
    assert rows["A"].unrealized_gain_home == Decimal("5000")
    assert rows["B"].current_price == Decimal("0")
    assert rows["B"].unrealized_gain_home == Decimal("-10000")
