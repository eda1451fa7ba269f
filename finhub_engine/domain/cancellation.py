"""Subscription cancellation strategy - policy-driven advice on when to cancel"""

from datetime import date, timedelta
from typing import Optional

from finhub_engine.domain.models import CancellationStrategy, RecurringCommitment
from finhub_engine.utils.date_utils import add_months, clamp_day_to_month

SAFETY_MARGIN_DAYS = 1
URGENT_CUTOFF_DAYS = 2
IDLE_USAGE_DAYS = 7
DEFAULT_DAYS_SINCE_USE = 30

# Custom-interval subscriptions are billed on an assumed 28-day cycle
BILLING_CYCLE_DAYS = {"daily": 1, "weekly": 7, "monthly": 30, "yearly": 365, "custom": 28}

POLICIES = ("end_of_cycle", "immediate", "prorated")


def next_billing_date(sub: RecurringCommitment, today: date) -> date:
    """
    Next renewal anchored on the billing day of month.

    Uses the subscription's day-of-month (or its start day) in the current
    month, clamped to the month's length; rolls to next month once passed.
    """
    day = sub.day_of_month or sub.start_date.day
    candidate = date(today.year, today.month, clamp_day_to_month(today.year, today.month, day))
    if candidate < today:
        candidate = add_months(candidate, 1, anchor_day=day)
    return candidate


def is_subscription(sub: RecurringCommitment) -> bool:
    """Flagged as a subscription, or an expense that carries a cancellation policy"""
    return sub.kind == "subscription" or (sub.type == "expense" and sub.cancellation is not None)


def billing_cycle_days(sub: RecurringCommitment) -> int:
    return BILLING_CYCLE_DAYS.get(sub.frequency, 30)


def _fmt(d: date) -> str:
    return d.strftime("%b %d")


def get_cancellation_strategy(sub: RecurringCommitment, today: Optional[date] = None) -> Optional[CancellationStrategy]:
    """
    Recommend when to cancel a subscription given its provider's policy.

    Policies:
    - end_of_cycle: access lasts through the paid period, so the only risk is
      missing the cutoff. Cancel now once the cutoff is 2 days away or less.
    - immediate: cancelling ends access at once, so hold until the cutoff.
    - prorated: unused time is refunded, so cancel now if idle for over a week.

    cutoff = next billing date - (grace days + 1 day safety margin).
    Unknown or missing policies are treated as end_of_cycle.

    Returns None for anything that is not an active or cancellation-pending subscription.
    """
    if not is_subscription(sub) or sub.status not in ("active", "cancellation_pending"):
        return None

    today = today or date.today()
    policy = sub.cancellation.policy if sub.cancellation else "end_of_cycle"
    if policy not in POLICIES:
        policy = "end_of_cycle"
    grace_days = sub.cancellation.grace_days if sub.cancellation else 0

    next_billing = next_billing_date(sub, today)
    cutoff = next_billing - timedelta(days=grace_days + SAFETY_MARGIN_DAYS)
    monthly_cost = sub.amount

    if policy == "immediate":
        return CancellationStrategy(
            optimal_date=cutoff,
            reason="Retain Access",
            urgency="medium",
            savings=monthly_cost,
            message=f"Cancel on {_fmt(cutoff)} to keep access as long as possible.",
            action_type="monitor",
        )

    if policy == "prorated":
        days_since_use = (today - sub.last_used_at).days if sub.last_used_at else DEFAULT_DAYS_SINCE_USE
        if days_since_use > IDLE_USAGE_DAYS:
            cycle = billing_cycle_days(sub)
            unused_days = min(cycle, max(0, (next_billing - today).days))
            refund = round(monthly_cost * unused_days / cycle, 2)
            return CancellationStrategy(
                optimal_date=today,
                reason="Unused / Prorated Refund",
                urgency="high",
                savings=monthly_cost,
                message=f"Refund available! Cancel now to recover about {refund:,.2f}.",
                action_type="cancel_now",
                refund_estimate=refund,
            )
        return CancellationStrategy(
            optimal_date=today,
            reason="Monitor Usage",
            urgency="low",
            savings=0,
            message="Usage detected recently. Keep monitoring.",
            action_type="monitor",
        )

    days_until_cutoff = (cutoff - today).days
    if days_until_cutoff <= URGENT_CUTOFF_DAYS:
        return CancellationStrategy(
            optimal_date=today,
            reason="Renewal Imminent",
            urgency="high",
            savings=monthly_cost,
            message=f"Cancel IMMEDIATELY to avoid {monthly_cost:,.2f} charge on {_fmt(next_billing)}.",
            action_type="cancel_now",
        )

    return CancellationStrategy(
        optimal_date=cutoff,
        reason="Maximize Decision Window",
        urgency="low",
        savings=monthly_cost,
        message=f"You have until {_fmt(cutoff)} to cancel safely.",
        action_type="wait",
    )
