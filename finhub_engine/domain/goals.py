"""Goal pacing - compares required vs. actual contribution rate and proposes corrections"""

import math
from datetime import date
from typing import Iterable, List, Optional

from finhub_engine.domain.models import (
    Expense,
    ExtendDeadline,
    Goal,
    GoalAdjustments,
    GoalAnalysisResult,
    IncreaseSavings,
    ReduceTarget,
)
from finhub_engine.utils.date_utils import add_months, months_between

BEHIND_THRESHOLD = 0.8
OVERDUE_MONTHS = 0.5
AVG_DAYS_PER_MONTH = 30.44


def months_left(goal: Goal, today: date) -> float:
    """
    Calendar months until the deadline.

    Floored at 1 for future deadlines. A passed (or missing) deadline returns
    half a month so the required rate reads as urgent.
    """
    if goal.target_date and goal.target_date > today:
        return max(1, months_between(today, goal.target_date))
    return OVERDUE_MONTHS


def goal_contributions(goal: Goal, expenses: Iterable[Expense]) -> List[Expense]:
    """Transactions earmarked for the goal, by goal id or a tag equal to the goal name"""
    name_tag = goal.name.lower()
    return [e for e in expenses if e.goal_id == goal.id or name_tag in (t.lower() for t in e.tags)]


def actual_monthly_rate(goal: Goal, expenses: Iterable[Expense]) -> float:
    """
    Observed monthly contribution pace.

    Mean monthly amount of tagged contributions over their date span (span at
    least half a month). Falls back to the planned contribution, then 0.
    """
    contributions = goal_contributions(goal, expenses)
    if contributions:
        dates = sorted(e.date for e in contributions)
        day_span = max(1, (dates[-1] - dates[0]).days)
        month_span = max(0.5, day_span / AVG_DAYS_PER_MONTH)
        return sum(e.amount for e in contributions) / month_span
    return goal.monthly_contribution or 0.0


def analyze_goal_drift(
    goal: Goal,
    expenses: Iterable[Expense],
    today: Optional[date] = None,
) -> Optional[GoalAnalysisResult]:
    """
    Pace analysis for one goal.

    Returns None for goals without a positive target or already completed.

    Example:
        target 120000, current 0, 6 months out, pace 5000/mo
        -> required 20000, drift 0.25, behind
    """
    if not goal.target_amount or goal.target_amount <= 0:
        return None
    if goal.status == "completed":
        return None

    today = today or date.today()
    remaining = max(0.0, goal.target_amount - goal.current_amount)
    months = months_left(goal, today)

    required_rate = remaining / months
    actual_rate = actual_monthly_rate(goal, expenses)

    drift = actual_rate / required_rate if required_rate > 0 else 0.0
    is_behind = required_rate > 0 and drift < BEHIND_THRESHOLD

    # Increase: contribute at least the required pace (never below the current pace)
    new_monthly = max(required_rate, actual_rate)
    increase_savings = IncreaseSavings(
        new_monthly=round(new_monthly),
        extra_needed=max(0, round(required_rate - actual_rate)),
    )

    # Extend: months needed at the current pace
    months_needed = remaining / actual_rate if actual_rate > 0 else months * 2
    extend_deadline = ExtendDeadline(
        new_date=add_months(today, math.ceil(months_needed)),
        months_more=max(1, math.ceil(months_needed - months)),
    )

    # Reduce: what the current pace reaches by the deadline
    achievable = min(goal.target_amount, goal.current_amount + actual_rate * months)
    reduce_target = ReduceTarget(
        new_target=min(round(achievable), goal.target_amount),
        reduction=max(0, round(goal.target_amount - achievable)),
    )

    return GoalAnalysisResult(
        goal_id=goal.id,
        required_rate=round(required_rate),
        actual_rate=round(actual_rate),
        drift=drift,
        is_behind=is_behind,
        months_left=months,
        adjustments=GoalAdjustments(
            increase_savings=increase_savings,
            extend_deadline=extend_deadline,
            reduce_target=reduce_target,
        ),
    )


def analyze_goals(
    goals: Iterable[Goal],
    expenses: Iterable[Expense],
    today: Optional[date] = None,
) -> List[GoalAnalysisResult]:
    """Analyze every applicable goal, skipping the ones that return None"""
    expenses = list(expenses)
    results = []
    for goal in goals:
        result = analyze_goal_drift(goal, expenses, today)
        if result is not None:
            results.append(result)
    return results
