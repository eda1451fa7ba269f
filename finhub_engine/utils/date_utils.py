"""Date manipulation utilities"""

import calendar
from datetime import date
from typing import Optional


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int, anchor_day: Optional[int] = None) -> date:
    """
    Add n calendar months to d, clamping the day to the target month's length.

    anchor_day re-targets the day of month, so a Jan 31 series reads
    Jan 31 -> Feb 28 -> Mar 31 instead of drifting to the 28th.
    """
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, anchor_day or d.day)
    return date(year, month, day)


def months_between(start: date, end: date) -> int:
    """Calendar months from start to end, ignoring the day of month"""
    return (end.year - start.year) * 12 + (end.month - start.month)


def whole_months_elapsed(start: date, end: date) -> int:
    """Completed months from start to end (a month counts once its day is reached)"""
    months = months_between(start, end)
    if end.day < start.day:
        months -= 1
    return months



def nth_weekday_of_month(year: int, month: int, nth: int, weekday: int) -> date:
    """
    Return the nth weekday (0=Monday) of a month.

    nth > 0 counts from the start of the month, nth < 0 from the end
    (-1 is the last such weekday). nth values past the month's supply
    clamp to the last one available.
    """
    last_day = calendar.monthrange(year, month)[1]
    if nth > 0:
        first = date(year, month, 1)
        offset = (weekday - first.weekday()) % 7
        day = 1 + offset + (nth - 1) * 7
        while day > last_day:
            day -= 7
        return date(year, month, day)

    last = date(year, month, last_day)
    offset = (last.weekday() - weekday) % 7
    day = last_day - offset - (abs(nth) - 1) * 7
    while day < 1:
        day += 7
    return date(year, month, day)
