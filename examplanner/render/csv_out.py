from __future__ import annotations

import csv
import io
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import Iterator

from ..scheduler.calendar import format_full_date, week_days, weeks_for_range
from ..scheduler.planner import Planner

HEADER = ["Period", "Date", "Slot", "Start", "End", "Code", "Label", "Level"]


@dataclass(frozen=True)
class ExportRow:
    period: str
    date: str  # dd/mm/yyyy
    slot: str  # 1-based
    start: str
    end: str
    code: str
    label: str
    level: str


def export_rows(planner: Planner) -> Iterator[ExportRow]:
    # Period order, then week, slot, weekday, and cell insertion order
    for p in planner.periods():
        slots = planner.slots(p.id)
        for monday, _ in weeks_for_range(p.start, p.end):
            for idx, slot in enumerate(slots):
                for day in week_days(monday):
                    if not p.contains(day):
                        continue
                    for s in planner.engine.resolved_cell(p.id, day, idx):
                        yield ExportRow(
                            p.label,
                            format_full_date(day),
                            str(idx + 1),
                            slot.start,
                            slot.end,
                            s.code,
                            s.label,
                            s.level,
                        )


def csv_rows(planner: Planner) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(HEADER)
    for row in export_rows(planner):
        writer.writerow(astuple(row))
    return buf.getvalue()


def write_csv_rows(text: str, outputs_dir: Path, name: str = "exams.csv") -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / name
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path

