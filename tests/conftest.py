from __future__ import annotations

from datetime import date

import pytest

from examplanner.data.loader import DEMO_SUBJECTS
from examplanner.models.period import PeriodKind
from examplanner.scheduler.planner import Planner


@pytest.fixture
def planner() -> Planner:
    # P1: Monday 2025-03-03 .. Friday 2025-03-07, one default slot 08:00-10:00
    p = Planner()
    p.add_period(PeriodKind.FINAL, "2024-2025", 2, date(2025, 3, 3), date(2025, 3, 7))
    p.replace_catalog(DEMO_SUBJECTS)
    return p
