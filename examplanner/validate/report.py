from __future__ import annotations

import json
from pathlib import Path
from typing import Dict


def write_validation_report(report: Dict[str, object], outputs_dir: Path) -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / "validation.json"
    with path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)
    return path


def format_validation_report(report: Dict[str, object]) -> str:
    lines: list[str] = []
    lines.append(f"violation_count: {report.get('violation_count')}")
    dups = report.get("duplicate_subjects", {})
    lines.append("duplicate_subjects:")
    if isinstance(dups, dict):
        for sid, cells in dups.items():
            lines.append(f"  - {sid}: {', '.join(cells)}")
    for key in ("duplicate_in_cell", "out_of_range_cells", "orphan_subjects"):
        items = report.get(key, [])
        lines.append(f"{key}: {len(items) if isinstance(items, list) else 0} entries")
    unscheduled = report.get("unscheduled_subjects", [])
    if isinstance(unscheduled, list):
        lines.append(f"unscheduled_subjects: {len(unscheduled)}")
        for sid in unscheduled:
            lines.append(f"  - {sid}")
    return "\n".join(lines)
