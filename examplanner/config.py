from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG_PATH = Path("configs/planner.toml")


@dataclass
class PlannerConfig:
    max_periods: int = 5
    default_slot_start: str = "08:00"
    slot_hours: int = 2
    state_file: str = "planner.json"
    outputs_dir: str = "outputs"
    log_dir: str = "logs"
    log_level: str = "INFO"
    preset_timeout: int = 10

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "PlannerConfig":
        known = {f.name for f in fields(cls)}
        # Unknown keys are ignored so older configs keep loading
        return cls(**{k: v for k, v in data.items() if k in known})


def load_config(path: Path | None = None) -> PlannerConfig:
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        return PlannerConfig()
    with cfg_path.open("rb") as f:
        t = tomllib.load(f)
    cfg = PlannerConfig.from_mapping(t.get("planner", {}) or {})
    logging.getLogger(__name__).debug(f"Loaded config from {cfg_path}")
    return cfg
