from __future__ import annotations

from dataclasses import astuple
from pathlib import Path
from typing import List, Sequence

from ..scheduler.planner import Planner
from .csv_out import HEADER, export_rows

# Period, Date, Slot, Start, End, Code, Label, Level
WIDTHS = [20, 10, 2, 5, 5, 12, 12, 10]


def fixed_width_line(fields: Sequence[str]) -> str:
    return "".join(str(v)[:w].ljust(w) for v, w in zip(fields, WIDTHS))


def fixed_width_rows(planner: Planner) -> str:
    lines: List[str] = [fixed_width_line(HEADER)]
    for row in export_rows(planner):
        lines.append(fixed_width_line(astuple(row)))
    return "\n".join(lines) + "\n"


def write_fixed_width(text: str, outputs_dir: Path, name: str = "exams.txt") -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / name
    with path.open("w", encoding="utf-8") as f:
        f.write(text)
    return path
