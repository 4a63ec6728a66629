from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Tuple

TARGET_PREFIX = "cell"


@dataclass(frozen=True, order=True)
class CellKey:
    period_id: int
    day: date
    slot_index: int

    @property
    def map_key(self) -> str:
        # Key inside a period's assignment map: "<ISO date>|<slot index>"
        return format_map_key(self.day, self.slot_index)

    @property
    def target_id(self) -> str:
        return f"{TARGET_PREFIX}:{self.period_id}:{self.day.isoformat()}:{self.slot_index}"


def format_map_key(day: date, slot_index: int) -> str:
    return f"{day.isoformat()}|{slot_index}"


def parse_map_key(key: str) -> Tuple[date, int]:
    """Split a ``"<ISO date>|<slot>"`` map key. Raises ValueError when malformed."""
    day_s, sep, slot_s = key.partition("|")
    if not sep:
        raise ValueError(f"Malformed cell key {key!r}")
    slot_index = int(slot_s)
    if slot_index < 0:
        raise ValueError(f"Negative slot index in {key!r}")
    return date.fromisoformat(day_s), slot_index


def parse_target_id(target_id: str) -> CellKey | None:
    """Recover the cell behind a drop target id, or None for foreign/garbled ids."""
    parts = target_id.split(":")
    if len(parts) != 4 or parts[0] != TARGET_PREFIX:
        return None
    try:
        return CellKey(int(parts[1]), date.fromisoformat(parts[2]), int(parts[3]))
    except ValueError:
        return None
