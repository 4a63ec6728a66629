from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping

from ..config import PlannerConfig
from ..data.periods import PeriodStore
from ..data.registry import SubjectRegistry
from ..errors import ConfirmationRequiredError, PlannerError
from ..models.assignment import CellKey
from ..models.period import Period, PeriodKind, TimeSlot
from ..models.subject import Subject
from ..models.timetable import Timetable
from . import commands as cmd
from .engine import AssignmentEngine


class Planner:
    """Periods, slots, catalog and assignments behind one mutation surface.

    Structural edits to a period or its slots always finish by pruning that
    period's assignment map so no cell points outside the period's shape.
    """

    def __init__(self, config: PlannerConfig | None = None):
        self.config = config or PlannerConfig()
        self.registry = SubjectRegistry()
        self.store = PeriodStore(
            max_periods=self.config.max_periods,
            default_slot_start=self.config.default_slot_start,
            slot_hours=self.config.slot_hours,
        )
        self.engine = AssignmentEngine(self.store, self.registry)
        self._handlers: Dict[type, Callable[[Any], Any]] = {
            cmd.Assign: lambda c: self.assign(c.period_id, c.day, c.slot_index, c.subject_id),
            cmd.Drop: lambda c: self.engine.drop(c.target_id, c.subject_id),
            cmd.Unassign: lambda c: self.unassign(c.period_id, c.day, c.slot_index, c.subject_id),
            cmd.AddPeriod: lambda c: self.add_period(c.kind, c.year, c.half, c.start, c.end),
            cmd.RemovePeriod: lambda c: self.remove_period(c.period_id, confirmed=c.confirmed),
            cmd.EditPeriodRange: lambda c: self.edit_period_range(c.period_id, c.start, c.end),
            cmd.EditPeriodMeta: lambda c: self.edit_period_meta(c.period_id, kind=c.kind, year=c.year, half=c.half),
            cmd.SetActivePeriod: lambda c: self.store.set_active(c.period_id),
            cmd.AddSlot: lambda c: self.add_slot(c.period_id),
            cmd.EditSlot: lambda c: self.edit_slot(c.period_id, c.index, start=c.start, end=c.end),
            cmd.RemoveSlot: lambda c: self.remove_slot(c.period_id, c.index),
            cmd.ReplaceCatalog: lambda c: self.replace_catalog(c.subjects),
            cmd.AddSubject: lambda c: self.registry.add_one(c.subject),
            cmd.EditSubject: lambda c: self.edit_subject(c.subject_id, code=c.code, label=c.label, level=c.level),
            cmd.ImportSnapshot: self._import_snapshot,
        }

    @property
    def active_id(self) -> int | None:
        return self.store.active_id

    def periods(self) -> List[Period]:
        return self.store.all()

    def slots(self, period_id: int) -> List[TimeSlot]:
        return self.store.slots(period_id)

    # Commands

    def apply(self, command: object) -> cmd.Result:
        logger = logging.getLogger(__name__)
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command {type(command).__name__}")
        try:
            value = handler(command)
        except PlannerError as e:
            logger.warning(f"{type(command).__name__} rejected: {e}")
            return cmd.Result(cmd.Outcome.REJECTED, str(e), error=e)
        if value is False:
            return cmd.Result(cmd.Outcome.NOOP)
        return cmd.Result(cmd.Outcome.APPLIED, value=value)

    def _import_snapshot(self, c: cmd.ImportSnapshot) -> List[str]:
        from ..data.snapshot import apply_snapshot

        return apply_snapshot(self, c.payload)

    # Periods and slots

    def add_period(self, kind: PeriodKind, year: str, half: int, start: date, end: date) -> Period:
        p = self.store.add(kind, year, half, start, end)
        self.engine.timetable(p.id)
        return p

    def remove_period(self, period_id: int, *, confirmed: bool = False) -> Period:
        if not confirmed:
            raise ConfirmationRequiredError(
                f"Removing period {period_id} deletes its slots and assignments; confirm to proceed"
            )
        p = self.store.remove(period_id)
        self.engine.drop_period(period_id)
        return p

    def edit_period_range(self, period_id: int, start: date, end: date) -> List[CellKey]:
        self.store.edit_range(period_id, start, end)
        return self.engine.prune(period_id)

    def edit_period_meta(
        self,
        period_id: int,
        *,
        kind: PeriodKind | None = None,
        year: str | None = None,
        half: int | None = None,
    ) -> List[CellKey]:
        self.store.edit_meta(period_id, kind=kind, year=year, half=half)
        return self.engine.prune(period_id)

    def add_slot(self, period_id: int) -> TimeSlot:
        slot = self.store.add_slot(period_id)
        self.engine.prune(period_id)
        return slot

    def edit_slot(self, period_id: int, index: int, *, start: str | None = None, end: str | None = None) -> TimeSlot:
        return self.store.edit_slot(period_id, index, start=start, end=end)

    def remove_slot(self, period_id: int, index: int) -> List[CellKey]:
        self.store.remove_slot(period_id, index)
        dropped = self.engine.drop_slot(period_id, index)
        return dropped + self.engine.prune(period_id)

    # Assignments

    def assign(self, period_id: int, day: date, slot_index: int, subject_id: str) -> bool:
        return self.engine.assign(period_id, day, slot_index, subject_id)

    def unassign(self, period_id: int, day: date, slot_index: int, subject_id: str) -> bool:
        return self.engine.unassign(period_id, day, slot_index, subject_id)

    def drop(self, target_id: str, subject_id: str) -> bool:
        return self.engine.drop(target_id, subject_id)

    # Catalog

    def replace_catalog(self, records: Iterable[Subject | Mapping[str, object]]) -> int:
        return len(self.registry.set_catalog(records))

    def edit_subject(self, subject_id: str, **changes: str | None) -> Subject:
        return self.registry.edit_one(subject_id, **{k: v for k, v in changes.items() if v is not None})

    # Bulk replacement (snapshot import)

    def replace_state(
        self,
        *,
        periods: List[Period] | None = None,
        slots: Dict[int, List[TimeSlot]] | None = None,
        timetables: Dict[int, Timetable] | None = None,
        subjects: List[Subject] | None = None,
        active_id: int | None = None,
    ) -> None:
        """Swap in already-decoded collections. No pruning is done here."""
        if periods is not None:
            self.store.periods = {p.id: p for p in periods}
        if slots is not None:
            self.store.slot_lists = {pid: list(v) for pid, v in slots.items()}
        if timetables is not None:
            self.engine.timetables = dict(timetables)
        if subjects is not None:
            self.registry.set_catalog(subjects)
        live = set(self.store.periods)
        self.store.slot_lists = {pid: self.store.slot_lists.get(pid, []) for pid in self.store.periods}
        self.engine.timetables = {pid: tt for pid, tt in self.engine.timetables.items() if pid in live}
        if active_id in live:
            self.store.active_id = active_id
        elif self.store.active_id not in live:
            self.store.active_id = min(live) if live else None
