"""Structured snapshot of the whole planner state.

Layout::

    {
      "periods": [{"id": 1, "kind": "final", "year": "2024-2025", "half": 2,
                   "start": "2025-06-02", "end": "2025-06-13"}],
      "activePeriodId": 1,
      "slotsPerPeriod": {"1": [{"start": "08:00", "end": "10:00"}]},
      "assignedPerPeriod": {"1": {"2025-06-02|0": ["mat101", "fis201"]}},
      "subjects": [{"id": "mat101", "code": "MAT101", "label": "CALC I", "level": "GRAU"}]
    }

Import replaces only the fields that are present with the expected shape.
Everything present is decoded before anything is swapped in, so a bad entry
leaves the planner untouched. Cells are not pruned on import.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List

from ..errors import InvalidPeriodError, SnapshotError
from ..models.assignment import format_map_key, parse_map_key
from ..models.period import Period, TimeSlot
from ..models.subject import Subject
from ..models.timetable import Timetable
from .periods import check_descriptor, coerce_kind
from .registry import subject_from_mapping

if TYPE_CHECKING:
    from ..scheduler.planner import Planner


FIELDS = ("periods", "slotsPerPeriod", "assignedPerPeriod", "subjects")


def to_snapshot(planner: "Planner") -> Dict[str, Any]:
    periods = planner.periods()
    assigned: Dict[str, Dict[str, List[str]]] = {}
    for p in periods:
        tt = planner.engine.timetables.get(p.id, Timetable())
        assigned[str(p.id)] = {
            format_map_key(d, s): list(ids) for (d, s), ids in sorted(tt.cells.items())
        }
    return {
        "periods": [
            {
                "id": p.id,
                "kind": p.kind.value,
                "year": p.year,
                "half": p.half,
                "start": p.start.isoformat(),
                "end": p.end.isoformat(),
            }
            for p in periods
        ],
        "activePeriodId": planner.active_id,
        "slotsPerPeriod": {
            str(p.id): [{"start": s.start, "end": s.end} for s in planner.slots(p.id)] for p in periods
        },
        "assignedPerPeriod": assigned,
        "subjects": [
            {"id": s.id, "code": s.code, "label": s.label, "level": s.level} for s in planner.registry.all()
        ],
    }


def dumps_snapshot(planner: "Planner") -> str:
    return json.dumps(to_snapshot(planner), indent=2, ensure_ascii=False)


def loads_snapshot(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid snapshot JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    return data


def _date(value: Any, what: str) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise SnapshotError(f"Bad date for {what}: {value!r}") from None


def _period_id(value: Any) -> int:
    try:
        pid = int(value)
    except (TypeError, ValueError):
        raise SnapshotError(f"Bad period id {value!r}") from None
    if pid <= 0:
        raise SnapshotError(f"Bad period id {value!r}")
    return pid


def decode_periods(raw: List[Any], max_periods: int) -> List[Period]:
    if not raw:
        raise SnapshotError("Snapshot contains no periods")
    if len(raw) > max_periods:
        raise SnapshotError(f"Snapshot has {len(raw)} periods; at most {max_periods} allowed")
    out: List[Period] = []
    seen: set[int] = set()
    for item in raw:
        if not isinstance(item, dict):
            raise SnapshotError(f"Bad period entry {item!r}")
        pid = _period_id(item.get("id"))
        if pid in seen:
            raise SnapshotError(f"Duplicate period id {pid}")
        seen.add(pid)
        start = _date(item.get("start"), f"period {pid} start")
        end = _date(item.get("end"), f"period {pid} end")
        try:
            kind = coerce_kind(item.get("kind", "final"))
            half = int(item.get("half", 1))
            check_descriptor(half, start, end)
        except (InvalidPeriodError, TypeError, ValueError) as e:
            raise SnapshotError(f"Bad period {pid}: {e}") from e
        out.append(Period(pid, kind, str(item.get("year", "")), half, start, end))
    return out


def decode_slots(raw: Dict[str, Any]) -> Dict[int, List[TimeSlot]]:
    out: Dict[int, List[TimeSlot]] = {}
    for key, items in raw.items():
        pid = _period_id(key)
        if not isinstance(items, list):
            raise SnapshotError(f"Slots of period {pid} must be a list")
        slots: List[TimeSlot] = []
        for s in items:
            if not isinstance(s, dict) or not isinstance(s.get("start"), str) or not isinstance(s.get("end"), str):
                raise SnapshotError(f"Bad slot {s!r} in period {pid}")
            slots.append(TimeSlot(s["start"], s["end"]))
        out[pid] = slots
    return out


def decode_assignments(raw: Dict[str, Any]) -> Dict[int, Timetable]:
    out: Dict[int, Timetable] = {}
    for key, cells in raw.items():
        pid = _period_id(key)
        if not isinstance(cells, dict):
            raise SnapshotError(f"Assignments of period {pid} must be an object")
        tt = Timetable()
        for cell_key, ids in cells.items():
            try:
                day, slot_index = parse_map_key(cell_key)
            except ValueError as e:
                raise SnapshotError(f"Bad cell key {cell_key!r} in period {pid}") from e
            if isinstance(ids, str):
                ids = [ids]
            if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
                raise SnapshotError(f"Bad subject list at {cell_key!r} in period {pid}")
            for sid in ids:
                tt.place(day, slot_index, sid)
            if not ids:
                tt.cells.pop((day, slot_index), None)
        out[pid] = tt
    return out


def decode_subjects(raw: List[Any]) -> List[Subject]:
    out: List[Subject] = []
    for item in raw:
        if not isinstance(item, dict):
            raise SnapshotError(f"Bad subject entry {item!r}")
        out.append(subject_from_mapping(item))
    return out


def upgrade_legacy(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Convert the single-range payload (startStr/endStr/slots/assigned) to the period layout."""
    if "periods" in payload or "startStr" not in payload or "endStr" not in payload:
        return payload
    start = _date(payload["startStr"], "startStr")
    out: Dict[str, Any] = {
        "periods": [
            {
                "id": 1,
                "kind": "final",
                "year": str(start.year),
                "half": 1,
                "start": payload["startStr"],
                "end": payload["endStr"],
            }
        ],
    }
    if isinstance(payload.get("slots"), list):
        out["slotsPerPeriod"] = {"1": payload["slots"]}
    if isinstance(payload.get("assigned"), dict):
        out["assignedPerPeriod"] = {"1": payload["assigned"]}
    if isinstance(payload.get("subjects"), list):
        out["subjects"] = payload["subjects"]
    logging.getLogger(__name__).info("Upgraded single-period snapshot")
    return out


def apply_snapshot(planner: "Planner", payload: Dict[str, Any]) -> List[str]:
    """Decode and swap in every well-shaped field. Returns the names applied."""
    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    payload = upgrade_legacy(payload)
    decoded: Dict[str, Any] = {}
    if isinstance(payload.get("periods"), list):
        decoded["periods"] = decode_periods(payload["periods"], planner.config.max_periods)
    if isinstance(payload.get("slotsPerPeriod"), dict):
        decoded["slots"] = decode_slots(payload["slotsPerPeriod"])
    if isinstance(payload.get("assignedPerPeriod"), dict):
        decoded["timetables"] = decode_assignments(payload["assignedPerPeriod"])
    if isinstance(payload.get("subjects"), list):
        decoded["subjects"] = decode_subjects(payload["subjects"])
    active = payload.get("activePeriodId")
    planner.replace_state(active_id=active if isinstance(active, int) else None, **decoded)
    applied = [name for name, key in zip(FIELDS, ("periods", "slots", "timetables", "subjects")) if key in decoded]
    logging.getLogger(__name__).info(f"Snapshot applied: {', '.join(applied) or 'nothing'}")
    return applied
