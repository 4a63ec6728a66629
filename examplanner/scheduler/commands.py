"""Command values accepted by ``Planner.apply``.

Every user action (a completed drop, a form edit, a finished file load) is
turned into one of these and applied as a single step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Tuple

from ..errors import PlannerError
from ..models.period import PeriodKind
from ..models.subject import Subject


class Outcome(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Result:
    outcome: Outcome
    message: str = ""
    error: PlannerError | None = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.REJECTED


@dataclass(frozen=True)
class Assign:
    period_id: int
    day: date
    slot_index: int
    subject_id: str


@dataclass(frozen=True)
class Drop:
    target_id: str  # "cell:<period>:<ISO date>:<slot>"
    subject_id: str


@dataclass(frozen=True)
class Unassign:
    period_id: int
    day: date
    slot_index: int
    subject_id: str


@dataclass(frozen=True)
class AddPeriod:
    kind: PeriodKind
    year: str
    half: int
    start: date
    end: date


@dataclass(frozen=True)
class RemovePeriod:
    period_id: int
    confirmed: bool = False


@dataclass(frozen=True)
class EditPeriodRange:
    period_id: int
    start: date
    end: date


@dataclass(frozen=True)
class EditPeriodMeta:
    period_id: int
    kind: PeriodKind | None = None
    year: str | None = None
    half: int | None = None


@dataclass(frozen=True)
class SetActivePeriod:
    period_id: int


@dataclass(frozen=True)
class AddSlot:
    period_id: int


@dataclass(frozen=True)
class EditSlot:
    period_id: int
    index: int
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True)
class RemoveSlot:
    period_id: int
    index: int


@dataclass(frozen=True)
class ReplaceCatalog:
    subjects: Tuple[Subject, ...]


@dataclass(frozen=True)
class AddSubject:
    subject: Subject


@dataclass(frozen=True)
class EditSubject:
    subject_id: str
    code: str | None = None
    label: str | None = None
    level: str | None = None


@dataclass(frozen=True)
class ImportSnapshot:
    payload: Dict[str, Any] = field(hash=False)
