from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Iterable, List, Tuple


Key = Tuple[date, int]  # (day, slot_index)


@dataclass
class Timetable:
    """One period's assignment map: (day, slot) -> ordered distinct subject ids.

    Empty cells are never stored.
    """

    cells: Dict[Key, List[str]] = field(default_factory=dict)

    def place(self, day: date, slot_index: int, subject_id: str) -> bool:
        ids = self.cells.setdefault((day, slot_index), [])
        if subject_id in ids:
            return False
        ids.append(subject_id)
        return True

    def get(self, day: date, slot_index: int) -> List[str]:
        return list(self.cells.get((day, slot_index), []))

    def remove(self, day: date, slot_index: int, subject_id: str) -> bool:
        ids = self.cells.get((day, slot_index))
        if not ids or subject_id not in ids:
            return False
        ids.remove(subject_id)
        if not ids:
            del self.cells[(day, slot_index)]
        return True

    def find(self, subject_id: str) -> Key | None:
        for key, ids in self.cells.items():
            if subject_id in ids:
                return key
        return None

    def subjects(self) -> Iterable[str]:
        for ids in self.cells.values():
            yield from ids

    def prune(self, keep: Callable[[date, int], bool]) -> List[Key]:
        dropped = [k for k in self.cells if not keep(*k)]
        for k in dropped:
            del self.cells[k]
        return dropped

    def drop_slot(self, slot_index: int) -> List[Key]:
        # Purge the removed slot, shift higher slots down so cells follow their slot
        dropped: List[Key] = []
        shifted: Dict[Key, List[str]] = {}
        for (d, s), ids in self.cells.items():
            if s == slot_index:
                dropped.append((d, s))
            elif s > slot_index:
                shifted[(d, s - 1)] = ids
            else:
                shifted[(d, s)] = ids
        self.cells = shifted
        return dropped
