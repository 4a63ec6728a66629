"""Monday–Friday week arithmetic for the exam grid.

Weeks always start on Monday regardless of locale; the grid shows five
weekdays per week.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List, Tuple

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri"]


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def week_end(day: date) -> date:
    return week_start(day) + timedelta(days=4)


def is_weekday(day: date) -> bool:
    return day.weekday() < 5


def week_days(monday: date) -> List[date]:
    return [monday + timedelta(days=i) for i in range(5)]


@dataclass(frozen=True)
class Weeks:
    """Restartable sequence of (monday, friday) pairs.

    Each iteration starts over at ``monday_start`` and stops once the current
    Monday passes ``friday_end``.
    """

    monday_start: date
    friday_end: date

    def __iter__(self) -> Iterator[Tuple[date, date]]:
        cur = self.monday_start
        while cur <= self.friday_end:
            yield cur, cur + timedelta(days=4)
            cur += timedelta(days=7)


def each_week(monday_start: date, friday_end: date) -> Weeks:
    return Weeks(monday_start, friday_end)


def weeks_for_range(start: date, end: date) -> Weeks:
    return each_week(week_start(start), week_end(end))


def format_day_month(day: date) -> str:
    return day.strftime("%d/%m")


def format_full_date(day: date) -> str:
    return day.strftime("%d/%m/%Y")
