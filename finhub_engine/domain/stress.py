"""Financial stress scoring - five weighted risk factors combined into one 0-100 score"""

import statistics
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from finhub_engine.domain.cashflow import (
    BURN_WINDOW_DAYS,
    ESSENTIAL_CATEGORIES,
    daily_essential_burn,
    essential_expenses,
    is_emi_liability,
    uncharged_commitments,
)
from finhub_engine.domain.models import (
    Expense,
    Goal,
    Liability,
    RecurringCommitment,
    StressFactors,
    StressScoreResult,
)
from finhub_engine.domain.recurrence import occurrences_per_month

STRESS_WEIGHTS: Dict[str, float] = {
    "emi_load": 0.25,
    "commitment_ratio": 0.25,
    "volatility": 0.20,
    "cash_runway": 0.20,
    "goal_drift": 0.10,
}

EMI_LOAD_PEAK = 0.45
COMMITMENT_PEAK = 0.70
VOLATILITY_PEAK = 1.5
RUNWAY_PEAK_DAYS = 90
NO_BURN_RUNWAY_DAYS = 365
MIN_VOLATILITY_SAMPLES = 5

STRESS_LEVELS = [
    (75, "critical", "Severe financial pressure detected. Review fixed costs immediately."),
    (50, "high", "High stress levels. Consider building more cash runway."),
    (25, "moderate", "Moderate turbulence. Watch your discretionary spending."),
]
CALM_MESSAGE = "Your financial weather is clear. Keep it up!"


def normalize(value: float, peak: float) -> float:
    """Scale value to 0-100 where `peak` maps to 100"""
    return max(0.0, min(100.0, value / peak * 100))


def volatility_score(
    expenses: Iterable[Expense],
    today: date,
    window_days: int = BURN_WINDOW_DAYS,
    categories: Iterable[str] = ESSENTIAL_CATEGORIES,
) -> float:
    """
    Coefficient of variation of daily essential spend, normalized at CV 1.5.

    Only days with essential spend are sampled. Fewer than 5 essential
    expenses is not enough signal and scores 0.
    """
    relevant = essential_expenses(expenses, today, window_days, categories)
    if len(relevant) < MIN_VOLATILITY_SAMPLES:
        return 0.0

    by_day: Dict[date, float] = defaultdict(float)
    for e in relevant:
        by_day[e.date] += e.amount

    daily: List[float] = list(by_day.values())
    mean = statistics.fmean(daily)
    if mean == 0:
        return 0.0

    cv = statistics.pstdev(daily) / mean
    return normalize(cv, VOLATILITY_PEAK)


def monthly_fixed_outflows(
    recurring: Iterable[RecurringCommitment],
    liabilities: Iterable[Liability] = (),
) -> float:
    """Monthly-equivalent cost of recurring expenses not already paid as an EMI"""
    return sum(
        r.amount * occurrences_per_month(r)
        for r in uncharged_commitments(recurring, liabilities)
        if r.type == "expense"
    )


def goal_drift_ratio(goals: Iterable[Goal], today: date) -> float:
    """Percentage of non-completed goals that are leaking or past their deadline"""
    active = [g for g in goals if g.status != "completed"]
    if not active:
        return 0.0
    behind = [
        g
        for g in active
        if g.status == "leaking"
        or (g.target_date is not None and g.target_date < today and g.current_amount < g.target_amount)
    ]
    return len(behind) / len(active) * 100


def stress_level(score: float) -> tuple[str, str]:
    """Map score to (level, message)"""
    for threshold, level, message in STRESS_LEVELS:
        if score > threshold:
            return level, message
    return "low", CALM_MESSAGE


def calculate_stress_score(
    total_balance: float,
    monthly_income: float,
    expenses: Iterable[Expense],
    recurring: Iterable[RecurringCommitment],
    liabilities: Iterable[Liability],
    goals: Iterable[Goal],
    today: Optional[date] = None,
    essential_categories: Iterable[str] = ESSENTIAL_CATEGORIES,
    burn_window_days: int = BURN_WINDOW_DAYS,
) -> StressScoreResult:
    """
    Calculate financial stress from 0 (calm) to 100 (critical).

    Scoring weights:
    - 25%: EMI load - EMIs / income, peaks at 45% debt-to-income
    - 25%: Commitment ratio - (recurring expenses + EMIs) / income, peaks at 70%
    - 20%: Volatility - CV of daily essential spend, peaks at 1.5
    - 20%: Cash runway - inverted, 0 stress at 90+ days of runway
    - 10%: Goal drift - share of goals leaking or overdue

    No income counts as a ratio of 1 (fully committed); no burn counts as a
    year of runway.
    """
    today = today or date.today()
    expenses = list(expenses)
    liabilities = list(liabilities)

    total_emi = sum(l.emi_amount for l in liabilities if is_emi_liability(l))
    emi_ratio = total_emi / monthly_income if monthly_income > 0 else 1.0
    emi_load = normalize(emi_ratio, EMI_LOAD_PEAK)

    fixed_outflows = monthly_fixed_outflows(recurring, liabilities) + total_emi
    commitment_ratio = fixed_outflows / monthly_income if monthly_income > 0 else 1.0
    commitment = normalize(commitment_ratio, COMMITMENT_PEAK)

    volatility = volatility_score(expenses, today, burn_window_days, essential_categories)

    daily_burn = daily_essential_burn(expenses, today, burn_window_days, essential_categories)
    runway_days = total_balance / daily_burn if daily_burn > 0 else NO_BURN_RUNWAY_DAYS
    runway = 100 - normalize(runway_days, RUNWAY_PEAK_DAYS)

    drift = goal_drift_ratio(goals, today)

    final_score = (
        emi_load * STRESS_WEIGHTS["emi_load"]
        + commitment * STRESS_WEIGHTS["commitment_ratio"]
        + volatility * STRESS_WEIGHTS["volatility"]
        + runway * STRESS_WEIGHTS["cash_runway"]
        + drift * STRESS_WEIGHTS["goal_drift"]
    )
    level, message = stress_level(final_score)

    return StressScoreResult(
        score=round(final_score),
        factors=StressFactors(
            emi_load=round(emi_load),
            commitment_ratio=round(commitment),
            volatility=round(volatility),
            cash_runway=round(runway),
            goal_drift=round(drift),
        ),
        level=level,
        message=message,
    )
