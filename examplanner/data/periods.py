from __future__ import annotations

import logging
import re
from datetime import date
from typing import Dict, List

from ..errors import (
    CapacityError,
    InvalidPeriodError,
    LastPeriodError,
    UnknownPeriodError,
)
from ..models.period import Period, PeriodKind, TimeSlot

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def shift_hours(hhmm: str, hours: int) -> str | None:
    """Add whole hours to an "HH:mm" string without wrapping at midnight."""
    m = _HHMM.match(hhmm)
    if m is None:
        return None
    h, mm = int(m.group(1)), m.group(2)
    return f"{h + hours:02d}:{mm}"


def coerce_kind(kind: PeriodKind | str) -> PeriodKind:
    try:
        return PeriodKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in PeriodKind)
        raise InvalidPeriodError(f"Unknown period kind {kind!r}; expected one of {valid}") from None


def check_descriptor(half: int, start: date, end: date) -> None:
    if half not in (1, 2):
        raise InvalidPeriodError(f"Half-year must be 1 or 2, got {half}")
    if start > end:
        raise InvalidPeriodError(f"Period start {start} is after end {end}")


class PeriodStore:
    """Ordered period descriptors and their slot lists.

    Assignment cascades are not handled here; see ``Planner``.
    """

    def __init__(self, max_periods: int = 5, default_slot_start: str = "08:00", slot_hours: int = 2):
        self.max_periods = max_periods
        self.default_slot_start = default_slot_start
        self.slot_hours = slot_hours
        self.periods: Dict[int, Period] = {}
        self.slot_lists: Dict[int, List[TimeSlot]] = {}
        self.active_id: int | None = None

    # Periods

    def get(self, period_id: int) -> Period | None:
        return self.periods.get(period_id)

    def require(self, period_id: int) -> Period:
        p = self.periods.get(period_id)
        if p is None:
            raise UnknownPeriodError(period_id)
        return p

    def all(self) -> List[Period]:
        return list(self.periods.values())

    def __len__(self) -> int:
        return len(self.periods)

    def next_id(self) -> int:
        return max(self.periods, default=0) + 1

    def add(self, kind: PeriodKind, year: str, half: int, start: date, end: date) -> Period:
        if len(self.periods) >= self.max_periods:
            raise CapacityError(self.max_periods)
        check_descriptor(half, start, end)
        p = Period(self.next_id(), coerce_kind(kind), str(year), half, start, end)
        self.periods[p.id] = p
        self.slot_lists[p.id] = [self.default_slot()]
        self.active_id = p.id
        logging.getLogger(__name__).info(f"Period {p.id} added: {p.label} {start}..{end}")
        return p

    def remove(self, period_id: int) -> Period:
        p = self.require(period_id)
        if len(self.periods) <= 1:
            raise LastPeriodError(period_id)
        del self.periods[period_id]
        self.slot_lists.pop(period_id, None)
        if self.active_id == period_id:
            self.active_id = min(self.periods)
        logging.getLogger(__name__).info(f"Period {period_id} removed; active is {self.active_id}")
        return p

    def edit_range(self, period_id: int, start: date, end: date) -> Period:
        p = self.require(period_id)
        check_descriptor(p.half, start, end)
        p.start, p.end = start, end
        return p

    def edit_meta(
        self,
        period_id: int,
        *,
        kind: PeriodKind | None = None,
        year: str | None = None,
        half: int | None = None,
    ) -> Period:
        p = self.require(period_id)
        new_half = p.half if half is None else half
        check_descriptor(new_half, p.start, p.end)
        if kind is not None:
            p.kind = coerce_kind(kind)
        if year is not None:
            p.year = str(year)
        p.half = new_half
        return p

    def set_active(self, period_id: int) -> None:
        self.require(period_id)
        self.active_id = period_id

    # Slots

    def default_slot(self) -> TimeSlot:
        start = self.default_slot_start
        return TimeSlot(start, shift_hours(start, self.slot_hours) or start)

    def slots(self, period_id: int) -> List[TimeSlot]:
        return self.slot_lists.get(period_id, [])

    def add_slot(self, period_id: int) -> TimeSlot:
        self.require(period_id)
        slots = self.slot_lists.setdefault(period_id, [])
        start = slots[-1].end if slots else self.default_slot_start
        end = shift_hours(start, self.slot_hours)
        if end is None:
            # Previous end is not "HH:mm"; restart from the default slot
            slot = self.default_slot()
        else:
            slot = TimeSlot(start, end)
        slots.append(slot)
        return slot

    def edit_slot(self, period_id: int, index: int, start: str | None = None, end: str | None = None) -> TimeSlot:
        self.require(period_id)
        slot = self.slots(period_id)[self._slot_index(period_id, index)]
        if start is not None:
            slot.start = start
        if end is not None:
            slot.end = end
        return slot

    def remove_slot(self, period_id: int, index: int) -> TimeSlot:
        self.require(period_id)
        i = self._slot_index(period_id, index)
        return self.slot_lists[period_id].pop(i)

    def _slot_index(self, period_id: int, index: int) -> int:
        if not 0 <= index < len(self.slots(period_id)):
            raise InvalidPeriodError(f"Period {period_id} has no slot {index}")
        return index
