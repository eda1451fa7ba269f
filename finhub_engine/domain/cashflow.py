"""Cash flow forecasting - projects a future balance from burn rate and fixed commitments"""

import math
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from finhub_engine.domain.models import Expense, ForecastResult, Liability, RecurringCommitment
from finhub_engine.domain.recurrence import project_occurrences
from finhub_engine.domain.transfers import is_transfer

ESSENTIAL_CATEGORIES = frozenset(
    {"Groceries", "Food & Dining", "Transport", "Healthcare", "Bills & Utilities", "Insurance"}
)
BURN_WINDOW_DAYS = 60
EMI_BLOCK_DAYS = 30


def essential_expenses(
    expenses: Iterable[Expense],
    today: date,
    window_days: int = BURN_WINDOW_DAYS,
    categories: Iterable[str] = ESSENTIAL_CATEGORIES,
) -> List[Expense]:
    """Essential-category expenses in the trailing window (today inclusive), transfers excluded"""
    wanted = {c.lower() for c in categories}
    cutoff = today - timedelta(days=window_days)
    return [
        e
        for e in expenses
        if cutoff <= e.date <= today and e.category.lower() in wanted and not is_transfer(e)
    ]


def daily_essential_burn(
    expenses: Iterable[Expense],
    today: Optional[date] = None,
    window_days: int = BURN_WINDOW_DAYS,
    categories: Iterable[str] = ESSENTIAL_CATEGORIES,
) -> float:
    """
    Average unavoidable spend per day.

    Total essential spend over the trailing window divided by the full window
    length, so quiet days count as zero-spend days.
    """
    today = today or date.today()
    if window_days <= 0:
        return 0.0
    relevant = essential_expenses(expenses, today, window_days, categories)
    return sum(e.amount for e in relevant) / window_days


def is_emi_liability(liability: Liability) -> bool:
    """Liability still being repaid through a positive EMI"""
    return liability.emi_amount > 0 and liability.status in ("active", "", None)


def uncharged_commitments(
    recurring: Iterable[RecurringCommitment],
    liabilities: Iterable[Liability],
) -> List[RecurringCommitment]:
    """
    Recurring rules that are not cancelled and not already paid as a liability EMI.

    A rule linked to an EMI-paying liability is the same installment seen twice.
    """
    emi_liability_ids = {l.id for l in liabilities if is_emi_liability(l)}
    return [
        r
        for r in recurring
        if r.status != "cancelled" and not (r.linked_liability_id and r.linked_liability_id in emi_liability_ids)
    ]


def project_fixed_commitments(
    recurring: Iterable[RecurringCommitment],
    liabilities: Iterable[Liability],
    days: int,
    today: Optional[date] = None,
) -> Tuple[float, float]:
    """
    Sum recurring outflows and inflows over [today, today + days).

    Liability EMIs are charged once per started 30-day block. Recurring rules
    linked to a liability that is already charged as an EMI are skipped so the
    installment is not counted twice.

    Returns: (outflows, inflows)
    """
    today = today or date.today()
    horizon_end = today + timedelta(days=days)

    active_liabilities = [l for l in liabilities if is_emi_liability(l)]

    outflows = 0.0
    inflows = 0.0

    for rule in uncharged_commitments(recurring, active_liabilities):
        occurrences = project_occurrences(rule, today, horizon_end)
        total = len(occurrences) * rule.amount
        if rule.type == "expense":
            outflows += total
        else:
            inflows += total

    blocks = math.ceil(days / EMI_BLOCK_DAYS) if days > 0 else 0
    for liability in active_liabilities:
        outflows += liability.emi_amount * blocks

    return outflows, inflows


def classify_risk(projected_balance: float, current_balance: float) -> str:
    """high below zero, medium under 20% of today's balance, low otherwise"""
    if projected_balance < 0:
        return "high"
    if projected_balance < current_balance * 0.2:
        return "medium"
    return "low"


def generate_forecast(
    current_balance: float,
    expenses: Iterable[Expense],
    recurring: Iterable[RecurringCommitment],
    liabilities: Iterable[Liability],
    days: int,
    today: Optional[date] = None,
    essential_categories: Iterable[str] = ESSENTIAL_CATEGORIES,
    burn_window_days: int = BURN_WINDOW_DAYS,
) -> ForecastResult:
    """
    Main entry point: project the balance `days` ahead.

    projected = balance + expected income - fixed commitments - daily burn * days

    Example:
        balance 10000, burn 200/day, 10 days, no commitments -> 8000, "low"
    """
    today = today or date.today()
    days = max(0, days)

    daily_burn = daily_essential_burn(expenses, today, burn_window_days, essential_categories)
    outflows, inflows = project_fixed_commitments(recurring, liabilities, days, today)

    daily_burn_total = daily_burn * days
    projected_balance = current_balance + inflows - outflows - daily_burn_total

    return ForecastResult(
        days=days,
        projected_balance=round(projected_balance, 2),
        fixed_commitments=round(outflows, 2),
        daily_burn_total=round(daily_burn_total, 2),
        expected_income=round(inflows, 2),
        risk_level=classify_risk(projected_balance, current_balance),
    )
