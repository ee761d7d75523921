"""
Budget ledger: money normalization and the spend-vs-budget check.

All amounts are Decimal internally. Display strings ("₱50,000") are produced
only by format_budget_display, at the response boundary.
"""
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional
from app.core.config import settings
from app.core.exceptions import InputValidationError

logger = logging.getLogger(__name__)

ZERO = Decimal(0)
_NON_NUMERIC = re.compile(r"[^\d.\-]")
_LEADING_NUMBER = re.compile(r"-?\d*\.?\d+")


@dataclass(frozen=True)
class BudgetTotals:
    """Trip budget, committed spend and what is left (may be negative)."""
    total_budget: Decimal
    total_spent: Decimal
    remaining_budget: Decimal


@dataclass(frozen=True)
class BudgetExceeded:
    """Error result returned when a proposed cost does not fit."""
    message: str
    remaining_budget: Decimal
    total_budget: Decimal
    total_spent: Decimal

    def to_payload(self) -> dict:
        return {
            "remainingBudget": float(self.remaining_budget),
            "totalBudget": float(self.total_budget),
            "totalSpent": float(self.total_spent),
        }


def parse_monetary_value(value) -> Decimal:
    """
    Normalize a stored or client-supplied amount to a Decimal.

    Accepts numbers, currency-formatted strings ("₱50,000", "$1,234.50"),
    None and "". Anything that does not yield a finite number becomes 0.
    Never raises.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        else:
            # Longest leading number: "1,000 - 2,000" reads as 1000
            match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", str(value)))
            if not match:
                return ZERO
            amount = Decimal(match.group())
    except (InvalidOperation, ValueError):
        return ZERO
    except Exception:
        logger.warning(f"Unexpected monetary value {value!r}; treating as 0", exc_info=True)
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def compute_totals(trip_budget, activity_costs: Iterable) -> BudgetTotals:
    """Sum activity costs against the trip budget. Remaining is not clamped."""
    total_budget = parse_monetary_value(trip_budget)
    total_spent = sum((parse_monetary_value(cost) for cost in activity_costs), ZERO)
    return BudgetTotals(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining_budget=total_budget - total_spent,
    )


def validate_proposed_spend(totals: BudgetTotals, proposed_cost: Decimal) -> Optional[BudgetExceeded]:
    """Return an error result if proposed_cost exceeds the remaining budget, else None."""
    if proposed_cost <= totals.remaining_budget:
        return None
    message = (
        f"Activity budget ({format_amount(proposed_cost)}) exceeds remaining trip budget "
        f"({format_amount(totals.remaining_budget)})"
    )
    return BudgetExceeded(
        message=message,
        remaining_budget=totals.remaining_budget,
        total_budget=totals.total_budget,
        total_spent=totals.total_spent,
    )


def parse_cost_input(value) -> Decimal:
    """
    Strictly parse the cost of a new activity.

    Empty means no cost. Unlike parse_monetary_value this rejects bad input,
    since it guards data being written now.
    """
    if value is None:
        return ZERO
    text = str(value).strip()
    if not text:
        return ZERO
    if isinstance(value, bool):
        raise InputValidationError("Budget must be a valid number", field="budget")
    try:
        cost = Decimal(text)
    except InvalidOperation:
        raise InputValidationError("Budget must be a valid number", field="budget")
    if not cost.is_finite():
        raise InputValidationError("Budget must be a valid number", field="budget")
    if cost < 0:
        raise InputValidationError("Budget cannot be negative", field="budget")
    if cost > settings.MAX_ACTIVITY_COST:
        raise InputValidationError(
            f"Budget is too large (maximum: {format_amount(settings.MAX_ACTIVITY_COST)})",
            field="budget",
        )
    return cost


def format_amount(value) -> str:
    """Currency-prefixed amount with separators, keeping sign and cents when present."""
    amount = parse_monetary_value(value)
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount == amount.to_integral_value():
        body = f"{int(amount):,}"
    else:
        body = f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,}"
    return f"{sign}{settings.CURRENCY_SYMBOL}{body}"


def format_budget_display(value) -> str:
    """Trip budget as shown to clients: whole units, never negative ("₱50,000")."""
    amount = parse_monetary_value(value)
    if amount <= 0:
        return f"{settings.CURRENCY_SYMBOL}0"
    rounded = int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return f"{settings.CURRENCY_SYMBOL}{rounded:,}"
