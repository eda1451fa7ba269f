"""Snapshot consistency checks applied at the service boundary"""

from collections import Counter
from typing import Iterable

from finhub_engine.domain.exceptions import InvalidRecurrenceRuleError, InvalidSnapshotError
from finhub_engine.domain.models import FinancialSnapshot
from finhub_engine.domain.recurrence import validate_rule


def _check_unique_ids(kind: str, ids: Iterable[str]) -> None:
    duplicates = sorted(i for i, n in Counter(ids).items() if n > 1)
    if duplicates:
        raise InvalidSnapshotError(f"Duplicate {kind} ids: {', '.join(duplicates)}")


def validate_snapshot(snapshot: FinancialSnapshot) -> None:
    """
    Reject snapshots the analyzers would silently misread.

    Raises:
        InvalidSnapshotError: duplicate ids within a collection, or a
            recurring rule that cannot be expanded
    """
    _check_unique_ids("account", (a.id for a in snapshot.accounts))
    _check_unique_ids("goal", (g.id for g in snapshot.goals))
    _check_unique_ids("liability", (l.id for l in snapshot.liabilities))
    _check_unique_ids("recurring", (r.id for r in snapshot.recurring))

    for rule in snapshot.recurring:
        try:
            validate_rule(rule)
        except InvalidRecurrenceRuleError as e:
            raise InvalidSnapshotError(f"Recurring rule {rule.id}: {e}") from e
