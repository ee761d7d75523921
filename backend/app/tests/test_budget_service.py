"""
Tests for the budget ledger.
"""
import pytest
from decimal import Decimal
from app.core.exceptions import InputValidationError
from app.services.budget_service import (
    compute_totals,
    format_budget_display,
    parse_cost_input,
    parse_monetary_value,
    validate_proposed_spend,
)


@pytest.mark.parametrize("value, expected", [
    ("₱50,000", Decimal("50000")),
    ("$1,234.50", Decimal("1234.50")),
    (" 750 ", Decimal("750")),
    (1200, Decimal("1200")),
    (99.5, Decimal("99.5")),
    (Decimal("10.25"), Decimal("10.25")),
    ("", Decimal(0)),
    (None, Decimal(0)),
    ("free", Decimal(0)),
    ("1.2.3", Decimal("1.2")),
    ("12.5.3", Decimal("12.5")),
    ("₱1,000 - ₱2,000", Decimal("1000")),
    ("-250 PHP", Decimal("-250")),
    ("--5", Decimal(0)),
    (float("nan"), Decimal(0)),
    (float("inf"), Decimal(0)),
    (True, Decimal(0)),
])
def test_parse_monetary_value(value, expected):
    assert parse_monetary_value(value) == expected


def test_parse_monetary_value_keeps_sign():
    assert parse_monetary_value("-₱500") == Decimal("-500")


def test_compute_totals_sums_costs():
    totals = compute_totals("₱1,000", [Decimal("300"), "200", None, 0])
    assert totals.total_budget == Decimal("1000")
    assert totals.total_spent == Decimal("500")
    assert totals.remaining_budget == Decimal("500")


def test_compute_totals_order_independent():
    costs = [Decimal("120.50"), Decimal("80"), Decimal("1.25")]
    forward = compute_totals(500, costs)
    backward = compute_totals(500, list(reversed(costs)))
    assert forward == backward
    assert forward.total_spent == Decimal("201.75")


def test_remaining_budget_not_clamped():
    totals = compute_totals(100, [Decimal("150")])
    assert totals.remaining_budget == Decimal("-50")


def test_validate_rejects_overspend_with_figures():
    totals = compute_totals(1000, [Decimal("500"), Decimal("300")])
    result = validate_proposed_spend(totals, Decimal("300"))
    assert result is not None
    assert result.to_payload() == {
        "remainingBudget": 200.0,
        "totalBudget": 1000.0,
        "totalSpent": 800.0,
    }
    assert result.message == "Activity budget (₱300) exceeds remaining trip budget (₱200)"


def test_validate_accepts_exact_remaining():
    totals = compute_totals(1000, [Decimal("800")])
    assert validate_proposed_spend(totals, Decimal("200")) is None


@pytest.mark.parametrize("value, expected", [
    (None, Decimal(0)),
    ("", Decimal(0)),
    ("  ", Decimal(0)),
    (0, Decimal(0)),
    ("250", Decimal("250")),
    (12.5, Decimal("12.5")),
])
def test_parse_cost_input_accepts(value, expected):
    assert parse_cost_input(value) == expected


@pytest.mark.parametrize("value, message", [
    ("abc", "Budget must be a valid number"),
    ("₱1,000", "Budget must be a valid number"),
    ("NaN", "Budget must be a valid number"),
    (-1, "Budget cannot be negative"),
    (1_000_000_000, "Budget is too large (maximum: ₱999,999,999)"),
])
def test_parse_cost_input_rejects(value, message):
    with pytest.raises(InputValidationError) as exc_info:
        parse_cost_input(value)
    assert exc_info.value.message == message
    assert exc_info.value.field == "budget"


@pytest.mark.parametrize("value, expected", [
    (Decimal("50000"), "₱50,000"),
    ("₱1,234,567", "₱1,234,567"),
    (Decimal("999.5"), "₱1,000"),
    (0, "₱0"),
    (-20, "₱0"),
    (None, "₱0"),
])
def test_format_budget_display(value, expected):
    assert format_budget_display(value) == expected
