from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path

from examplanner.models.period import PeriodKind
from examplanner.models.subject import Subject
from examplanner.render.csv_out import HEADER, csv_rows, export_rows, write_csv_rows
from examplanner.render.text_out import WIDTHS, fixed_width_rows, write_fixed_width
from examplanner.scheduler.planner import Planner

MON = date(2025, 3, 3)
TUE = date(2025, 3, 4)


def _fill(planner: Planner) -> Planner:
    planner.add_slot(1)
    planner.assign(1, TUE, 0, "mat101")
    planner.assign(1, MON, 1, "fis201")
    planner.assign(1, MON, 0, "prg150")
    planner.assign(1, MON, 0, "alg300")
    return planner


def test_rows_follow_week_slot_day_order(planner: Planner) -> None:
    rows = list(export_rows(_fill(planner)))
    assert [r.code for r in rows] == ["PRG150", "ALG300", "MAT101", "FIS201"]
    assert [r.slot for r in rows] == ["1", "1", "1", "2"]
    assert rows[2].date == "04/03/2025"
    assert rows[3].start == "10:00" and rows[3].end == "12:00"


def test_periods_export_in_store_order(planner: Planner) -> None:
    _fill(planner)
    planner.add_period(PeriodKind.MIDTERM, "2024-2025", 2, date(2025, 1, 13), date(2025, 1, 17))
    planner.registry.add_one(Subject("est100", "EST100", "EST", "GRAU"))
    planner.assign(2, date(2025, 1, 13), 0, "est100")
    rows = list(export_rows(planner))
    assert [r.period for r in rows] == ["Final 2024-2025 Q2"] * 4 + ["Midterm 2024-2025 Q2"]


def test_csv_quotes_every_field(planner: Planner) -> None:
    planner.registry.add_one(Subject("q1", "Q1", 'say "hi"', "GRAU"))
    planner.assign(1, MON, 0, "q1")
    text = csv_rows(planner)
    lines = text.splitlines()
    assert lines[0] == ",".join(f'"{h}"' for h in HEADER)
    assert lines[1] == '"Final 2024-2025 Q2","03/03/2025","1","08:00","10:00","Q1","say ""hi""","GRAU"'
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[1][6] == 'say "hi"'


def test_orphans_and_empty_cells_are_not_exported(planner: Planner) -> None:
    _fill(planner)
    planner.replace_catalog([Subject("mat101", "MAT101", "CALC I", "GRAU")])
    rows = list(export_rows(planner))
    assert [r.code for r in rows] == ["MAT101"]


def test_fixed_width_layout(planner: Planner) -> None:
    planner.registry.add_one(Subject("long", "VERYLONGCODE1234", "A LONG LABEL HERE", "MÀSTER"))
    planner.assign(1, MON, 0, "long")
    lines = fixed_width_rows(planner).splitlines()
    assert len(lines) == 2
    assert all(len(line) == sum(WIDTHS) for line in lines)
    row = lines[1]
    assert row[:20] == "Final 2024-2025 Q2  "
    assert row[20:30] == "03/03/2025"
    assert row[30:32] == "1 "
    assert row[32:42] == "08:0010:00"
    assert row[42:54] == "VERYLONGCODE"
    assert row[54:66] == "A LONG LABEL"
    assert row[66:] == "MÀSTER    "
    assert lines[0].startswith("Period".ljust(20) + "Date".ljust(10) + "Sl")


def test_fixed_width_has_header_only_when_empty(planner: Planner) -> None:
    assert fixed_width_rows(planner).count("\n") == 1


def test_writers_create_output_dir(planner: Planner, tmp_path: Path) -> None:
    _fill(planner)
    out = tmp_path / "outputs"
    csv_path = write_csv_rows(csv_rows(planner), out)
    txt_path = write_fixed_width(fixed_width_rows(planner), out)
    assert csv_path.read_text(encoding="utf-8").count("\n") == 5
    assert txt_path.read_text(encoding="utf-8").count("\n") == 5
