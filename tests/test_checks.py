from __future__ import annotations

from datetime import date
from pathlib import Path

from examplanner.data.snapshot import apply_snapshot
from examplanner.scheduler.planner import Planner
from examplanner.validate.checks import validate_all
from examplanner.validate.report import format_validation_report, write_validation_report


def test_clean_state_has_no_violations(planner: Planner) -> None:
    planner.assign(1, date(2025, 3, 3), 0, "mat101")
    report = validate_all(planner)
    assert report["violation_count"] == 0
    assert report["unscheduled_subjects"] == ["fis201", "prg150", "alg300"]


def test_hand_edited_snapshot_is_reported(planner: Planner, tmp_path: Path) -> None:
    apply_snapshot(
        planner,
        {
            "assignedPerPeriod": {
                "1": {
                    "2025-03-03|0": ["mat101", "zzz"],
                    "2025-03-04|0": ["mat101"],
                    "2025-03-20|0": ["fis201"],
                    "2025-03-08|0": ["prg150"],
                }
            }
        },
    )
    report = validate_all(planner)
    assert report["duplicate_subjects"] == {"mat101": ["1:2025-03-03:0", "1:2025-03-04:0"]}
    assert report["out_of_range_cells"] == ["1:2025-03-08:0", "1:2025-03-20:0"]
    assert report["orphan_subjects"] == ["zzz"]
    assert report["violation_count"] == 3
    text = format_validation_report(report)
    assert "violation_count: 3" in text
    assert "mat101" in text
    path = write_validation_report(report, tmp_path / "out")
    assert path.name == "validation.json" and path.exists()
