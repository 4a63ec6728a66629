from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

from ..scheduler.calendar import is_weekday
from ..scheduler.planner import Planner


def validate_all(planner: Planner) -> Dict[str, object]:
    """Audit the assignment maps, typically after importing a hand-edited snapshot.

    Engine commands never produce these violations; imports are not pruned and
    may carry them.
    """
    report: Dict[str, object] = {}

    # Global uniqueness: subject -> every cell holding it
    where: Dict[str, List[str]] = defaultdict(list)
    dup_in_cell: List[str] = []
    out_of_range: List[str] = []
    for pid, tt in planner.engine.timetables.items():
        p = planner.store.get(pid)
        n_slots = len(planner.slots(pid))
        for (d, s), ids in tt.cells.items():
            cell = f"{pid}:{d.isoformat()}:{s}"
            for sid in ids:
                where[sid].append(cell)
            if len(ids) != len(set(ids)):
                dup_in_cell.append(cell)
            if p is None or not p.contains(d) or not is_weekday(d) or not 0 <= s < n_slots:
                out_of_range.append(cell)

    report["duplicate_subjects"] = {sid: cells for sid, cells in where.items() if len(cells) > 1}
    report["duplicate_in_cell"] = dup_in_cell
    report["out_of_range_cells"] = sorted(out_of_range)
    report["orphan_subjects"] = sorted(sid for sid in where if sid not in planner.registry)
    report["unscheduled_subjects"] = [s.id for s in planner.engine.available_subjects()]
    report["violation_count"] = (
        len(report["duplicate_subjects"]) + len(dup_in_cell) + len(out_of_range)
    )
    return report
