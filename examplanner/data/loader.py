from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict
from urllib.parse import parse_qs, urlsplit

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..config import PlannerConfig
from ..errors import PresetError, SnapshotError
from ..models.period import PeriodKind, TimeSlot
from ..models.subject import Subject
from ..scheduler.calendar import week_end, week_start
from ..scheduler.planner import Planner
from .snapshot import apply_snapshot, dumps_snapshot, loads_snapshot, to_snapshot

DEMO_SUBJECTS = [
    Subject("mat101", "MAT101", "CALC I", "GRAU"),
    Subject("fis201", "FIS201", "FIS II", "GRAU"),
    Subject("prg150", "PRG150", "PRG", "GRAU"),
    Subject("alg300", "ALG300", "ALG", "MÀSTER"),
]

DEMO_SLOTS = [("08:00", "10:00"), ("10:30", "12:30"), ("15:00", "17:00")]

_URL_START = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return loads_snapshot(f.read())


def write_json(planner: Planner, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(dumps_snapshot(planner))


def demo_planner(today: date | None = None, config: PlannerConfig | None = None) -> Planner:
    today = today or date.today()
    planner = Planner(config)
    p = planner.add_period(PeriodKind.FINAL, str(today.year), 1, week_start(today), week_end(today))
    planner.store.slot_lists[p.id] = [TimeSlot(s, e) for s, e in DEMO_SLOTS]
    planner.replace_catalog(DEMO_SUBJECTS)
    return planner


def load_state(path: Path, config: PlannerConfig | None = None) -> Planner:
    """Planner from a snapshot file; the demo state when the file does not exist yet."""
    if not path.exists():
        logging.getLogger(__name__).info(f"No state at {path}; starting from demo state")
        return demo_planner(config=config)
    planner = demo_planner(config=config)
    apply_snapshot(planner, load_json(path))
    return planner


# Presets


@retry(
    stop=stop_after_attempt(3),
    wait=wait_fixed(1),
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    reraise=True,
)
def _get(url: str, timeout: int) -> requests.Response:
    return requests.get(url, timeout=timeout)


def fetch_preset(url: str, timeout: int = 10) -> Dict[str, Any]:
    logger = logging.getLogger(__name__)
    logger.info(f"Fetching preset from {url}")
    try:
        resp = _get(url, timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise PresetError(f"Could not fetch preset {url}: {e}") from e
    try:
        return loads_snapshot(resp.text)
    except SnapshotError as e:
        raise PresetError(f"Preset {url} is not a snapshot: {e}") from e


def decode_inline_preset(data: str) -> Dict[str, Any]:
    padded = data + "=" * (-len(data) % 4)
    try:
        text = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise PresetError(f"Inline preset is not base64 JSON: {e}") from e
    try:
        return loads_snapshot(text)
    except SnapshotError as e:
        raise PresetError(f"Inline preset is not a snapshot: {e}") from e


def encode_inline_preset(planner: Planner) -> str:
    raw = json.dumps(to_snapshot(planner), separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def preset_from_query(query: str, timeout: int = 10) -> Dict[str, Any] | None:
    """Resolve ``?preset=<url>`` or ``?data=<base64url>``; None when neither is given.

    Accepts a bare query string or a full URL.
    """
    if _URL_START.match(query) or query.startswith("/"):
        query = urlsplit(query).query
    params = parse_qs(query.lstrip("?"))
    if params.get("data"):
        return decode_inline_preset(params["data"][0])
    if params.get("preset"):
        return fetch_preset(params["preset"][0], timeout=timeout)
    return None


def apply_preset(planner: Planner, query: str, timeout: int = 10) -> bool:
    payload = preset_from_query(query, timeout=timeout)
    if payload is None:
        return False
    apply_snapshot(planner, payload)
    return True
