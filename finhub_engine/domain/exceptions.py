"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecurrenceRuleError(DomainException):
    """Recurrence rule cannot produce a finite, strictly increasing series"""

    pass


class InvalidSnapshotError(DomainException):
    """Snapshot data is malformed or inconsistent"""

    pass
