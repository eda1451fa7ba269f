"""Recurrence projection - expands recurring commitment rules into concrete dates"""

import logging
from datetime import date, timedelta
from typing import List, Optional

from finhub_engine.domain.exceptions import InvalidRecurrenceRuleError
from finhub_engine.domain.models import Occurrence, RecurringCommitment
from finhub_engine.utils.date_utils import add_months, clamp_day_to_month, months_between, nth_weekday_of_month

logger = logging.getLogger(__name__)

DEFAULT_ITERATION_CAP = 10_000
AVG_DAYS_PER_MONTH = 30.44

FREQUENCIES = ("daily", "weekly", "monthly", "yearly", "custom")
MONTH_BASED = ("monthly", "yearly")


def validate_rule(rule: RecurringCommitment) -> None:
    """
    Reject rules that cannot produce a strictly increasing series.

    Raises:
        InvalidRecurrenceRuleError: unknown frequency, non-positive interval,
            missing/non-positive custom interval, or out-of-range anchors
    """
    if rule.frequency not in FREQUENCIES:
        raise InvalidRecurrenceRuleError(f"Unknown frequency: {rule.frequency!r}")
    if rule.interval < 1:
        raise InvalidRecurrenceRuleError(f"Interval must be positive, got {rule.interval}")
    if rule.frequency == "custom" and (rule.custom_interval_days is None or rule.custom_interval_days <= 0):
        raise InvalidRecurrenceRuleError(
            f"Custom frequency needs a positive interval in days, got {rule.custom_interval_days}"
        )
    if rule.day_of_month is not None and not 1 <= rule.day_of_month <= 31:
        raise InvalidRecurrenceRuleError(f"Day of month out of range: {rule.day_of_month}")
    if rule.nth_week is not None:
        if rule.nth_week == 0 or not -5 <= rule.nth_week <= 5:
            raise InvalidRecurrenceRuleError(f"nth_week out of range: {rule.nth_week}")
        if rule.weekday is None or not 0 <= rule.weekday <= 6:
            raise InvalidRecurrenceRuleError(f"nth_week rules need a weekday 0-6, got {rule.weekday}")


def step_days(rule: RecurringCommitment) -> int:
    """Nominal (strictly positive) number of days between occurrences"""
    if rule.frequency == "custom":
        return rule.custom_interval_days or 1
    base = {"daily": 1, "weekly": 7, "monthly": 30, "yearly": 365}.get(rule.frequency, 30)
    return base * max(rule.interval, 1)


def occurrences_per_month(rule: RecurringCommitment) -> float:
    """How many times a rule fires in an average month (for monthly-equivalent costs)"""
    interval = max(rule.interval, 1)
    if rule.frequency == "daily":
        return AVG_DAYS_PER_MONTH / interval
    if rule.frequency == "weekly":
        return (52 / 12) / interval
    if rule.frequency == "yearly":
        return 1 / (12 * interval)
    if rule.frequency == "custom":
        return AVG_DAYS_PER_MONTH / (rule.custom_interval_days or AVG_DAYS_PER_MONTH)
    return 1 / interval


def _months_step(rule: RecurringCommitment) -> int:
    return rule.interval * (12 if rule.frequency == "yearly" else 1)


def _month_occurrence(rule: RecurringCommitment, first: date, month_offset: int) -> date:
    """Occurrence falling month_offset calendar months after the first one"""
    if rule.frequency == "monthly" and rule.nth_week is not None:
        shifted = add_months(first.replace(day=1), month_offset)
        return nth_weekday_of_month(shifted.year, shifted.month, rule.nth_week, rule.weekday)
    # Yearly rules repeat on the start date's own day; day_of_month anchors monthly rules only
    anchor = (rule.frequency == "monthly" and rule.day_of_month) or rule.start_date.day
    return add_months(first, month_offset, anchor_day=anchor)


def _first_occurrence(rule: RecurringCommitment) -> date:
    """First occurrence on or after the rule's start date"""
    start = rule.start_date
    if rule.frequency != "monthly":
        return start

    if rule.nth_week is not None:
        first = nth_weekday_of_month(start.year, start.month, rule.nth_week, rule.weekday)
        if first < start:
            shifted = add_months(start.replace(day=1), rule.interval)
            first = nth_weekday_of_month(shifted.year, shifted.month, rule.nth_week, rule.weekday)
        return first

    anchor = rule.day_of_month or start.day
    first = date(start.year, start.month, clamp_day_to_month(start.year, start.month, anchor))
    if first < start:
        first = add_months(first, rule.interval, anchor_day=anchor)
    return first


def expand_occurrences(
    rule: RecurringCommitment,
    window_start: date,
    window_end: date,
    iteration_cap: int = DEFAULT_ITERATION_CAP,
) -> List[Occurrence]:
    """
    Expand a rule into its occurrences inside the half-open window [window_start, window_end).

    The cursor is seeded at the first occurrence on/after the rule's start date and
    stepped forward by frequency. Fixed-step and month-based rules jump straight
    to the occurrence just before the window, so only steps spent near the window
    count against iteration_cap.

    Raises:
        InvalidRecurrenceRuleError: rule fails validation or would exceed iteration_cap
    """
    validate_rule(rule)
    if window_end <= window_start:
        return []

    first = _first_occurrence(rule)
    month_based = rule.frequency in MONTH_BASED

    if month_based:
        months_step = _months_step(rule)
        j = max(0, (months_between(first, window_start) - 1) // months_step)
    else:
        days_step = step_days(rule)
        j = max(0, (window_start - first).days // days_step)

    occurrences: List[Occurrence] = []
    steps = 0
    while True:
        if steps >= iteration_cap:
            raise InvalidRecurrenceRuleError(
                f"Rule {rule.id} exceeded {iteration_cap} iterations between {window_start} and {window_end}"
            )

        if month_based:
            current = _month_occurrence(rule, first, j * months_step)
        else:
            current = first + timedelta(days=j * days_step)

        if current >= window_end:
            break
        if rule.end_date and current > rule.end_date:
            break

        # Only strictly increasing dates inside the window are emitted
        if current >= window_start and (not occurrences or current > occurrences[-1].date):
            occurrences.append(Occurrence(date=current, index=j + 1))

        j += 1
        steps += 1

    return occurrences


def project_occurrences(
    rule: RecurringCommitment,
    window_start: date,
    window_end: date,
    iteration_cap: int = DEFAULT_ITERATION_CAP,
) -> List[date]:
    """
    Occurrence dates of a rule in [window_start, window_end).

    Malformed rules (invalid input or runaway expansion) yield an empty list.
    """
    try:
        return [o.date for o in expand_occurrences(rule, window_start, window_end, iteration_cap)]
    except InvalidRecurrenceRuleError as e:
        logger.warning(f"Skipping malformed recurrence rule: {e}", extra={"rule_id": rule.id})
        return []


def next_occurrence(rule: RecurringCommitment, after: date) -> Optional[date]:
    """First occurrence strictly after the given date, or None if the rule has ended"""
    window_start = after + timedelta(days=1)
    # Two nominal steps plus a month covers month-length and nth-weekday jitter
    window_end = window_start + timedelta(days=2 * step_days(rule) + 31)
    dates = project_occurrences(rule, window_start, window_end)
    return dates[0] if dates else None
