# Re-export common types
from .assignment import CellKey
from .period import Period, PeriodKind, TimeSlot
from .subject import Subject
from .timetable import Timetable

__all__ = [
    "Subject",
    "Period",
    "PeriodKind",
    "TimeSlot",
    "CellKey",
    "Timetable",
]
