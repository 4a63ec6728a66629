from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from ..config import PlannerConfig, load_config
from ..data.catalog import load_catalog
from ..data.loader import apply_preset, demo_planner, load_json, load_state, write_json
from ..errors import PlannerError
from ..models.period import PeriodKind
from ..models.subject import Subject
from ..render.csv_out import csv_rows, write_csv_rows
from ..render.text_out import fixed_width_rows, write_fixed_width
from ..scheduler import commands as cmd
from ..scheduler.calendar import DAY_LABELS, format_day_month, week_days, weeks_for_range
from ..scheduler.planner import Planner
from ..validate.checks import validate_all
from ..validate.report import format_validation_report, write_validation_report


def _setup_logging(logs_dir: Path, level: str) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "planner.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
        force=True,
    )


@dataclass
class Session:
    config: PlannerConfig
    state_path: Path

    def load(self) -> Planner:
        return load_state(self.state_path, self.config)

    def save(self, planner: Planner) -> None:
        write_json(planner, self.state_path)


app = typer.Typer(add_completion=False, help="Exam period planner")


@app.callback()
def main(
    ctx: typer.Context,
    state: Optional[Path] = typer.Option(None, help="Snapshot file holding the planner state"),
    config: Optional[Path] = typer.Option(None, help="TOML config (default configs/planner.toml)"),
    log_level: Optional[str] = typer.Option(None, help="Log level"),
) -> None:
    cfg = load_config(config)
    _setup_logging(Path(cfg.log_dir), log_level or cfg.log_level)
    ctx.obj = Session(cfg, state or Path(cfg.state_file))


def _session(ctx: typer.Context) -> Session:
    return ctx.obj


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from None


def _period_or_active(planner: Planner, period: Optional[int]) -> int:
    pid = period if period is not None else planner.active_id
    if pid is None:
        raise typer.BadParameter("No period given and no active period")
    return pid


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _run(ctx: typer.Context, planner: Planner, command: object, done: str) -> cmd.Result:
    result = planner.apply(command)
    if result.outcome is cmd.Outcome.REJECTED:
        _fail(result.message)
    if result.outcome is cmd.Outcome.NOOP:
        typer.echo("Nothing to do")
        return result
    _session(ctx).save(planner)
    typer.echo(done)
    return result


@app.command("init")
def cli_init(ctx: typer.Context, force: bool = typer.Option(False, help="Overwrite an existing state file")) -> None:
    sess = _session(ctx)
    if sess.state_path.exists() and not force:
        _fail(f"{sess.state_path} already exists (use --force)")
    sess.save(demo_planner(config=sess.config))
    typer.echo(f"Wrote {sess.state_path}")


@app.command("show")
def cli_show(ctx: typer.Context) -> None:
    planner = _session(ctx).load()
    for p in planner.periods():
        mark = "*" if p.id == planner.active_id else " "
        typer.echo(f"{mark}[{p.id}] {p.label}  {p.start.isoformat()} .. {p.end.isoformat()}")
        slots = planner.slots(p.id)
        for monday, friday in weeks_for_range(p.start, p.end):
            typer.echo(f"  Week {format_day_month(monday)} - {format_day_month(friday)}")
            for idx, slot in enumerate(slots):
                cells: List[str] = []
                for label, day in zip(DAY_LABELS, week_days(monday)):
                    if not p.contains(day):
                        cells.append(f"{label}: --")
                        continue
                    names = [s.label or s.code for s in planner.engine.resolved_cell(p.id, day, idx)]
                    cells.append(f"{label}: {', '.join(names) or '.'}")
                typer.echo(f"    {idx + 1}. {slot.label:<11} " + " | ".join(cells))


@app.command("add-period")
def cli_add_period(
    ctx: typer.Context,
    kind: PeriodKind,
    year: str,
    half: int,
    start: str,
    end: str,
) -> None:
    planner = _session(ctx).load()
    result = _run(
        ctx,
        planner,
        cmd.AddPeriod(kind, year, half, _parse_day(start), _parse_day(end)),
        "Period added",
    )
    typer.echo(f"Period id: {result.value.id}")


@app.command("remove-period")
def cli_remove_period(
    ctx: typer.Context,
    period_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    planner = _session(ctx).load()
    if not yes:
        typer.confirm(
            f"Remove period {period_id} with all its slots and assignments?",
            abort=True,
        )
    _run(ctx, planner, cmd.RemovePeriod(period_id, confirmed=True), f"Period {period_id} removed")


@app.command("edit-period")
def cli_edit_period(
    ctx: typer.Context,
    period_id: int,
    start: Optional[str] = typer.Option(None),
    end: Optional[str] = typer.Option(None),
    kind: Optional[PeriodKind] = typer.Option(None),
    year: Optional[str] = typer.Option(None),
    half: Optional[int] = typer.Option(None),
) -> None:
    planner = _session(ctx).load()
    p = planner.store.get(period_id)
    if p is None:
        _fail(f"Unknown period {period_id}")
    pruned = 0
    if start is not None or end is not None:
        new_start = _parse_day(start) if start else p.start
        new_end = _parse_day(end) if end else p.end
        result = planner.apply(cmd.EditPeriodRange(period_id, new_start, new_end))
        if not result.ok:
            _fail(result.message)
        pruned += len(result.value)
    if kind is not None or year is not None or half is not None:
        result = planner.apply(cmd.EditPeriodMeta(period_id, kind=kind, year=year, half=half))
        if not result.ok:
            _fail(result.message)
        pruned += len(result.value)
    _session(ctx).save(planner)
    typer.echo(f"Period {period_id} updated ({pruned} assignments dropped)")


@app.command("activate")
def cli_activate(ctx: typer.Context, period_id: int) -> None:
    planner = _session(ctx).load()
    _run(ctx, planner, cmd.SetActivePeriod(period_id), f"Period {period_id} is active")


@app.command("add-slot")
def cli_add_slot(ctx: typer.Context, period: Optional[int] = typer.Option(None)) -> None:
    planner = _session(ctx).load()
    result = _run(ctx, planner, cmd.AddSlot(_period_or_active(planner, period)), "Slot added")
    typer.echo(result.value.label)


@app.command("edit-slot")
def cli_edit_slot(
    ctx: typer.Context,
    slot: int = typer.Argument(..., help="1-based slot number"),
    start: Optional[str] = typer.Option(None),
    end: Optional[str] = typer.Option(None),
    period: Optional[int] = typer.Option(None),
) -> None:
    planner = _session(ctx).load()
    pid = _period_or_active(planner, period)
    _run(ctx, planner, cmd.EditSlot(pid, slot - 1, start=start, end=end), f"Slot {slot} updated")


@app.command("remove-slot")
def cli_remove_slot(
    ctx: typer.Context,
    slot: int = typer.Argument(..., help="1-based slot number"),
    period: Optional[int] = typer.Option(None),
) -> None:
    planner = _session(ctx).load()
    pid = _period_or_active(planner, period)
    result = _run(ctx, planner, cmd.RemoveSlot(pid, slot - 1), f"Slot {slot} removed")
    typer.echo(f"{len(result.value)} assignments dropped")


@app.command("add-subject")
def cli_add_subject(
    ctx: typer.Context,
    code: str,
    label: str,
    level: str = typer.Argument(""),
    subject_id: Optional[str] = typer.Option(None, "--id"),
) -> None:
    planner = _session(ctx).load()
    result = _run(ctx, planner, cmd.AddSubject(Subject(subject_id or code, code, label, level)), "Subject added")
    typer.echo(f"Subject id: {result.value.id}")


@app.command("import-catalog")
def cli_import_catalog(ctx: typer.Context, path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    planner = _session(ctx).load()
    try:
        subjects = load_catalog(path)
    except PlannerError as e:
        _fail(str(e))
    result = _run(ctx, planner, cmd.ReplaceCatalog(tuple(subjects)), "Catalog replaced")
    typer.echo(f"Imported {result.value} subjects")


@app.command("assign")
def cli_assign(
    ctx: typer.Context,
    subject_id: str,
    day: str,
    slot: int = typer.Argument(..., help="1-based slot number"),
    period: Optional[int] = typer.Option(None),
) -> None:
    planner = _session(ctx).load()
    pid = _period_or_active(planner, period)
    _run(ctx, planner, cmd.Assign(pid, _parse_day(day), slot - 1, subject_id), f"Assigned {subject_id}")


@app.command("drop")
def cli_drop(ctx: typer.Context, subject_id: str, target: str) -> None:
    planner = _session(ctx).load()
    _run(ctx, planner, cmd.Drop(target, subject_id), f"Assigned {subject_id}")


@app.command("unassign")
def cli_unassign(
    ctx: typer.Context,
    subject_id: str,
    day: str,
    slot: int = typer.Argument(..., help="1-based slot number"),
    period: Optional[int] = typer.Option(None),
) -> None:
    planner = _session(ctx).load()
    pid = _period_or_active(planner, period)
    _run(ctx, planner, cmd.Unassign(pid, _parse_day(day), slot - 1, subject_id), f"Unassigned {subject_id}")


@app.command("available")
def cli_available(ctx: typer.Context) -> None:
    planner = _session(ctx).load()
    for s in planner.engine.available_subjects():
        typer.echo(f"{s.id}\t{s.display}")


@app.command("export-json")
def cli_export_json(ctx: typer.Context, path: Path) -> None:
    write_json(_session(ctx).load(), path)
    typer.echo(f"Wrote {path}")


@app.command("import-json")
def cli_import_json(ctx: typer.Context, path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    planner = _session(ctx).load()
    try:
        payload = load_json(path)
    except (PlannerError, OSError) as e:
        _fail(str(e))
    _run(ctx, planner, cmd.ImportSnapshot(payload), f"Imported {path}")


@app.command("export-csv")
def cli_export_csv(ctx: typer.Context, out: Optional[Path] = typer.Option(None, help="Output directory")) -> None:
    sess = _session(ctx)
    path = write_csv_rows(csv_rows(sess.load()), out or Path(sess.config.outputs_dir))
    typer.echo(f"Wrote {path}")


@app.command("export-txt")
def cli_export_txt(ctx: typer.Context, out: Optional[Path] = typer.Option(None, help="Output directory")) -> None:
    sess = _session(ctx)
    path = write_fixed_width(fixed_width_rows(sess.load()), out or Path(sess.config.outputs_dir))
    typer.echo(f"Wrote {path}")


@app.command("validate")
def cli_validate(ctx: typer.Context) -> None:
    sess = _session(ctx)
    report = validate_all(sess.load())
    write_validation_report(report, Path(sess.config.outputs_dir))
    typer.echo(format_validation_report(report))
    if report["violation_count"]:
        raise typer.Exit(code=1)


@app.command("load-preset")
def cli_load_preset(ctx: typer.Context, query: str) -> None:
    sess = _session(ctx)
    planner = sess.load()
    try:
        applied = apply_preset(planner, query, timeout=sess.config.preset_timeout)
    except PlannerError as e:
        _fail(str(e))
    if not applied:
        _fail("Query has neither preset= nor data=")
    sess.save(planner)
    typer.echo("Preset applied")


if __name__ == "__main__":  # pragma: no cover
    app()
