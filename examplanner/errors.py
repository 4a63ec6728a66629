"""Error hierarchy for planner commands.

Expected no-op outcomes (dropping on a disabled day, re-dropping a subject
into the cell it already occupies) are not errors and never raise. Everything
below is a rejected command: the state is left exactly as it was.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.assignment import CellKey


class PlannerError(Exception):
    """Base exception for all rejected planner operations."""

    pass


class CapacityError(PlannerError):
    """The period store is full."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Cannot add more than {limit} periods")
        self.limit = limit


class LastPeriodError(PlannerError):
    """Removing the only remaining period."""

    def __init__(self, period_id: int) -> None:
        super().__init__(f"Period {period_id} is the last period and cannot be removed")
        self.period_id = period_id


class UnknownPeriodError(PlannerError):
    def __init__(self, period_id: int) -> None:
        super().__init__(f"Unknown period {period_id}")
        self.period_id = period_id


class InvalidPeriodError(PlannerError):
    """Descriptor fields out of their allowed domain (half-year, date order, slot index)."""

    pass


class ConfirmationRequiredError(PlannerError):
    """Destructive cascade attempted without explicit confirmation."""

    pass


class SubjectConflictError(PlannerError):
    """Subject is already scheduled in another cell.

    Carries the cell currently holding the subject so callers can point the
    user at it.
    """

    def __init__(self, subject_id: str, existing: "CellKey") -> None:
        super().__init__(
            f"Subject {subject_id!r} already scheduled at period {existing.period_id}, "
            f"{existing.day.isoformat()}, slot {existing.slot_index + 1}"
        )
        self.subject_id = subject_id
        self.existing = existing


class UnknownSubjectError(PlannerError):
    def __init__(self, subject_id: str) -> None:
        super().__init__(f"Unknown subject {subject_id!r}")
        self.subject_id = subject_id


class InputError(PlannerError):
    """Malformed external input. Prior state is fully preserved."""

    pass


class SnapshotError(InputError):
    pass


class CatalogImportError(InputError):
    pass


class PresetError(InputError):
    pass


class InvalidSubjectError(InputError):
    """Subject record with no id, code or label to identify it."""

    pass
