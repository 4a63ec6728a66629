from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Set

from ..data.periods import PeriodStore
from ..data.registry import SubjectRegistry
from ..errors import SubjectConflictError
from ..models.assignment import CellKey, parse_target_id
from ..models.subject import Subject
from ..models.timetable import Timetable
from .calendar import is_weekday


class AssignmentEngine:
    """Maps (period, day, slot) cells to subject ids.

    A subject id occupies at most one cell across every period. Derived views
    (used ids, available subjects) are recomputed from the maps on each call.
    """

    def __init__(self, store: PeriodStore, registry: SubjectRegistry):
        self.store = store
        self.registry = registry
        self.timetables: Dict[int, Timetable] = {}

    def timetable(self, period_id: int) -> Timetable:
        return self.timetables.setdefault(period_id, Timetable())

    def is_enabled(self, period_id: int, day: date, slot_index: int) -> bool:
        p = self.store.get(period_id)
        if p is None:
            return False
        return p.contains(day) and is_weekday(day) and 0 <= slot_index < len(self.store.slots(period_id))

    def locate(self, subject_id: str) -> CellKey | None:
        for pid, tt in self.timetables.items():
            key = tt.find(subject_id)
            if key is not None:
                return CellKey(pid, key[0], key[1])
        return None

    def assign(self, period_id: int, day: date, slot_index: int, subject_id: str) -> bool:
        logger = logging.getLogger(__name__)
        if not self.is_enabled(period_id, day, slot_index):
            logger.debug(f"Ignored drop of {subject_id} on disabled cell {period_id}/{day}/{slot_index}")
            return False
        tt = self.timetable(period_id)
        if subject_id in tt.get(day, slot_index):
            return False
        existing = self.locate(subject_id)
        if existing is not None:
            raise SubjectConflictError(subject_id, existing)
        tt.place(day, slot_index, subject_id)
        logger.info(f"Assigned {subject_id} -> period {period_id} {day} slot {slot_index}")
        return True

    def unassign(self, period_id: int, day: date, slot_index: int, subject_id: str) -> bool:
        tt = self.timetables.get(period_id)
        if tt is None or not tt.remove(day, slot_index, subject_id):
            return False
        logging.getLogger(__name__).info(f"Unassigned {subject_id} from period {period_id} {day} slot {slot_index}")
        return True

    def drop(self, target_id: str, subject_id: str) -> bool:
        key = parse_target_id(target_id)
        if key is None:
            logging.getLogger(__name__).debug(f"Ignored drop on foreign target {target_id!r}")
            return False
        return self.assign(key.period_id, key.day, key.slot_index, subject_id)

    def prune(self, period_id: int) -> List[CellKey]:
        tt = self.timetables.get(period_id)
        p = self.store.get(period_id)
        if tt is None:
            return []
        if p is None:
            dropped = list(tt.cells)
            tt.cells.clear()
        else:
            n_slots = len(self.store.slots(period_id))
            dropped = tt.prune(lambda d, s: p.contains(d) and is_weekday(d) and 0 <= s < n_slots)
        if dropped:
            logging.getLogger(__name__).info(f"Pruned {len(dropped)} cells from period {period_id}")
        return [CellKey(period_id, d, s) for d, s in dropped]

    def drop_period(self, period_id: int) -> None:
        self.timetables.pop(period_id, None)

    def drop_slot(self, period_id: int, slot_index: int) -> List[CellKey]:
        tt = self.timetables.get(period_id)
        if tt is None:
            return []
        return [CellKey(period_id, d, s) for d, s in tt.drop_slot(slot_index)]

    def cell(self, period_id: int, day: date, slot_index: int) -> List[str]:
        tt = self.timetables.get(period_id)
        return tt.get(day, slot_index) if tt is not None else []

    def resolved_cell(self, period_id: int, day: date, slot_index: int) -> List[Subject]:
        return self.registry.resolve(self.cell(period_id, day, slot_index))

    def used_subject_ids(self) -> Set[str]:
        used: Set[str] = set()
        for tt in self.timetables.values():
            used.update(tt.subjects())
        return used

    def available_subjects(self) -> List[Subject]:
        used = self.used_subject_ids()
        return [s for s in self.registry.all() if s.id not in used]
