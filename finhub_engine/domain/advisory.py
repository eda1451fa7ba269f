"""Advisory bundle - runs every analyzer over one snapshot"""

from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional

from finhub_engine.domain.architect import analyze_financial_freedom
from finhub_engine.domain.cancellation import get_cancellation_strategy, is_subscription
from finhub_engine.domain.cashflow import BURN_WINDOW_DAYS, ESSENTIAL_CATEGORIES, generate_forecast
from finhub_engine.domain.context import DEFAULT_POLICY, ArchitectPolicy
from finhub_engine.domain.goals import analyze_goals
from finhub_engine.domain.models import AdvisoryBundle, FinancialSnapshot, SubscriptionAdvice
from finhub_engine.domain.stress import calculate_stress_score
from finhub_engine.domain.subscriptions import calculate_subscription_roi

DEFAULT_HORIZON_DAYS = 30


def advise_subscriptions(snapshot: FinancialSnapshot, today: Optional[date] = None) -> List[SubscriptionAdvice]:
    """Cancellation strategy and ROI for every subscription in the snapshot"""
    today = today or snapshot.today or date.today()
    return [
        SubscriptionAdvice(
            subscription_id=sub.id,
            strategy=get_cancellation_strategy(sub, today),
            roi=calculate_subscription_roi(sub, snapshot.expenses, today),
        )
        for sub in snapshot.recurring
        if is_subscription(sub)
    ]


def build_advisory(
    snapshot: FinancialSnapshot,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    essential_categories: Iterable[str] = ESSENTIAL_CATEGORIES,
    burn_window_days: int = BURN_WINDOW_DAYS,
    policy: ArchitectPolicy = DEFAULT_POLICY,
) -> AdvisoryBundle:
    """
    Main entry point: every analyzer's result for one snapshot.

    Analyzers are independent; each one reads the same snapshot and the same
    reference date.
    """
    today = snapshot.today or date.today()
    categories = frozenset(essential_categories)
    balance = snapshot.total_balance

    return AdvisoryBundle(
        forecast=generate_forecast(
            balance,
            snapshot.expenses,
            snapshot.recurring,
            snapshot.liabilities,
            horizon_days,
            today=today,
            essential_categories=categories,
            burn_window_days=burn_window_days,
        ),
        stress=calculate_stress_score(
            balance,
            snapshot.monthly_income,
            snapshot.expenses,
            snapshot.recurring,
            snapshot.liabilities,
            snapshot.goals,
            today=today,
            essential_categories=categories,
            burn_window_days=burn_window_days,
        ),
        goals=analyze_goals(snapshot.goals, snapshot.expenses, today),
        subscriptions=advise_subscriptions(snapshot, today),
        architect=analyze_financial_freedom(replace(snapshot, today=today), policy),
    )
