from __future__ import annotations

from datetime import date

import pytest

from examplanner.config import PlannerConfig
from examplanner.errors import (
    CapacityError,
    ConfirmationRequiredError,
    InvalidPeriodError,
    LastPeriodError,
    UnknownPeriodError,
)
from examplanner.models.period import PeriodKind, TimeSlot
from examplanner.scheduler import commands as cmd
from examplanner.scheduler.planner import Planner

MON = date(2025, 3, 3)


def _add(planner: Planner, start: date, end: date, kind: PeriodKind = PeriodKind.MIDTERM) -> int:
    return planner.add_period(kind, "2024-2025", 1, start, end).id


def test_add_period_seeds_default_slot_and_activates(planner: Planner) -> None:
    pid = _add(planner, date(2025, 1, 13), date(2025, 1, 17))
    assert pid == 2
    assert planner.active_id == 2
    assert planner.slots(2) == [TimeSlot("08:00", "10:00")]
    assert planner.store.get(2).label == "Midterm 2024-2025 Q1"
    assert planner.store.get(1).label == "Final 2024-2025 Q2"


def test_capacity_is_five_periods(planner: Planner) -> None:
    for i in range(4):
        _add(planner, date(2025, 4, 7 + i), date(2025, 4, 7 + i))
    assert len(planner.store) == 5
    with pytest.raises(CapacityError):
        _add(planner, date(2025, 5, 5), date(2025, 5, 9))
    result = planner.apply(cmd.AddPeriod(PeriodKind.FINAL, "2025", 1, date(2025, 5, 5), date(2025, 5, 9)))
    assert result.outcome is cmd.Outcome.REJECTED
    assert len(planner.store) == 5


def test_capacity_follows_config() -> None:
    p = Planner(PlannerConfig(max_periods=1))
    _add(p, MON, date(2025, 3, 7))
    with pytest.raises(CapacityError):
        _add(p, MON, date(2025, 3, 7))


def test_next_id_is_max_plus_one(planner: Planner) -> None:
    _add(planner, date(2025, 4, 7), date(2025, 4, 11))
    _add(planner, date(2025, 4, 14), date(2025, 4, 18))
    planner.remove_period(2, confirmed=True)
    assert _add(planner, date(2025, 5, 5), date(2025, 5, 9)) == 4


def test_invalid_descriptors_are_rejected(planner: Planner) -> None:
    with pytest.raises(InvalidPeriodError):
        planner.add_period(PeriodKind.FINAL, "2025", 3, MON, MON)
    with pytest.raises(InvalidPeriodError):
        planner.add_period(PeriodKind.FINAL, "2025", 1, date(2025, 3, 7), MON)
    with pytest.raises(InvalidPeriodError):
        planner.add_period("exam", "2025", 1, MON, MON)
    with pytest.raises(InvalidPeriodError):
        planner.edit_period_range(1, date(2025, 3, 7), MON)
    assert len(planner.store) == 1


def test_remove_requires_confirmation(planner: Planner) -> None:
    _add(planner, date(2025, 4, 7), date(2025, 4, 11))
    with pytest.raises(ConfirmationRequiredError):
        planner.remove_period(2)
    assert planner.store.get(2) is not None
    result = planner.apply(cmd.RemovePeriod(2))
    assert isinstance(result.error, ConfirmationRequiredError)


def test_last_period_cannot_be_removed(planner: Planner) -> None:
    with pytest.raises(LastPeriodError):
        planner.remove_period(1, confirmed=True)
    with pytest.raises(UnknownPeriodError):
        planner.remove_period(9, confirmed=True)
    assert planner.store.get(1) is not None


def test_remove_cascades_and_reactivates_lowest(planner: Planner) -> None:
    _add(planner, date(2025, 4, 7), date(2025, 4, 11))
    _add(planner, date(2025, 4, 14), date(2025, 4, 18))
    planner.store.set_active(2)
    planner.assign(2, date(2025, 4, 7), 0, "mat101")
    planner.remove_period(2, confirmed=True)
    assert planner.active_id == 1
    assert 2 not in planner.engine.timetables
    assert planner.slots(2) == []
    assert "mat101" in [s.id for s in planner.engine.available_subjects()]
    # Removing a non-active period keeps the active one
    planner.store.set_active(3)
    planner.remove_period(1, confirmed=True)
    assert planner.active_id == 3


def test_range_shrink_prunes_cells(planner: Planner) -> None:
    planner.assign(1, MON, 0, "mat101")
    planner.assign(1, date(2025, 3, 7), 0, "fis201")
    dropped = planner.edit_period_range(1, MON, date(2025, 3, 5))
    assert [k.day for k in dropped] == [date(2025, 3, 7)]
    assert planner.engine.cell(1, MON, 0) == ["mat101"]
    assert "fis201" in [s.id for s in planner.engine.available_subjects()]


def test_range_edit_prunes_weekend_cells(planner: Planner) -> None:
    planner.assign(1, MON, 0, "mat101")
    # hand-edited state: a cell on the Saturday after the period
    planner.engine.timetable(1).place(date(2025, 3, 8), 0, "prg150")
    dropped = planner.edit_period_range(1, MON, date(2025, 3, 9))
    assert [k.day for k in dropped] == [date(2025, 3, 8)]
    assert planner.engine.cell(1, MON, 0) == ["mat101"]
    assert not planner.engine.is_enabled(1, date(2025, 3, 8), 0)


def test_meta_edit_keeps_assignments(planner: Planner) -> None:
    planner.assign(1, MON, 0, "mat101")
    assert planner.edit_period_meta(1, kind=PeriodKind.REASSESSMENT, year="2025-2026", half=1) == []
    p = planner.store.get(1)
    assert p.label == "Re-assessment 2025-2026 Q1"
    assert planner.engine.cell(1, MON, 0) == ["mat101"]
    with pytest.raises(InvalidPeriodError):
        planner.edit_period_meta(1, half=0)
    assert planner.store.get(1).half == 1


def test_add_slot_chains_from_previous_end(planner: Planner) -> None:
    planner.edit_slot(1, 0, end="09:30")
    assert planner.add_slot(1) == TimeSlot("09:30", "11:30")
    planner.edit_slot(1, 1, end="23:15")
    # No wrap-around at midnight
    assert planner.add_slot(1) == TimeSlot("23:15", "25:15")
    planner.edit_slot(1, 2, end="late")
    assert planner.add_slot(1) == TimeSlot("08:00", "10:00")


def test_add_slot_on_empty_list_uses_default(planner: Planner) -> None:
    planner.remove_slot(1, 0)
    assert planner.slots(1) == []
    assert planner.add_slot(1) == TimeSlot("08:00", "10:00")


def test_remove_middle_slot_shifts_higher_cells(planner: Planner) -> None:
    planner.add_slot(1)
    planner.add_slot(1)
    planner.assign(1, MON, 0, "mat101")
    planner.assign(1, MON, 1, "fis201")
    planner.assign(1, MON, 2, "prg150")
    dropped = planner.remove_slot(1, 1)
    assert [(k.day, k.slot_index) for k in dropped] == [(MON, 1)]
    assert planner.slots(1) == [TimeSlot("08:00", "10:00"), TimeSlot("12:00", "14:00")]
    assert planner.engine.cell(1, MON, 0) == ["mat101"]
    # The 12:00 exam follows its slot to index 1
    assert planner.engine.cell(1, MON, 1) == ["prg150"]
    assert planner.engine.cell(1, MON, 2) == []
    assert "fis201" in [s.id for s in planner.engine.available_subjects()]


def test_remove_unknown_slot_is_rejected(planner: Planner) -> None:
    planner.assign(1, MON, 0, "mat101")
    result = planner.apply(cmd.RemoveSlot(1, 3))
    assert result.outcome is cmd.Outcome.REJECTED
    assert len(planner.slots(1)) == 1
    assert planner.engine.cell(1, MON, 0) == ["mat101"]
