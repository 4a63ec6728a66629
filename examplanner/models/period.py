from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class PeriodKind(str, Enum):
    MIDTERM = "midterm"
    FINAL = "final"
    REASSESSMENT = "reassessment"

    @property
    def display_name(self) -> str:
        return {
            PeriodKind.MIDTERM: "Midterm",
            PeriodKind.FINAL: "Final",
            PeriodKind.REASSESSMENT: "Re-assessment",
        }[self]


@dataclass
class TimeSlot:
    start: str  # "HH:mm", not validated
    end: str

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass
class Period:
    id: int
    kind: PeriodKind
    year: str
    half: int  # 1 or 2
    start: date
    end: date

    @property
    def label(self) -> str:
        return f"{self.kind.display_name} {self.year} Q{self.half}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end
