"""Subscription ROI - cost per use from usage transactions and manual usage taps"""

from datetime import date
from typing import Iterable, Optional

from finhub_engine.domain.models import Expense, RecurringCommitment, SubscriptionROI


def count_passive_usage(sub: RecurringCommitment, expenses: Iterable[Expense], cycle_start: date) -> int:
    """
    Usage transactions in the current cycle.

    A usage is an expense since cycle_start that names the subscription in its
    description or points at it by recurring id, and is smaller than the
    subscription charge itself (so the renewal payment is not counted).
    """
    name = (sub.description or "").lower()
    count = 0
    for e in expenses:
        if e.date < cycle_start:
            continue
        name_match = bool(name) and name in (e.description or "").lower()
        id_match = e.recurring_id == sub.id
        if (name_match or id_match) and e.amount < sub.amount:
            count += 1
    return count


def calculate_subscription_roi(
    sub: RecurringCommitment,
    expenses: Iterable[Expense],
    today: Optional[date] = None,
) -> SubscriptionROI:
    """
    Cost-per-use metrics for a subscription.

    Poor ROI means the subscription was effectively used once this cycle:
    cost per use above half the charge, fewer than 3 uses, non-zero cost.
    """
    today = today or date.today()
    cycle_start = today.replace(day=1)

    passive = count_passive_usage(sub, expenses, cycle_start)
    active = sub.manual_usage_count or 0
    total_usage = max(1, passive + active)

    monthly_cost = sub.amount
    cost_per_use = monthly_cost / total_usage
    is_poor_roi = cost_per_use > monthly_cost / 2 and total_usage < 3 and monthly_cost > 0

    return SubscriptionROI(
        cost_per_use=round(cost_per_use, 2),
        total_usage=total_usage,
        passive_usage=passive,
        active_usage=active,
        is_poor_roi=is_poor_roi,
        frequency_per_month=total_usage,
    )
