from __future__ import annotations

from datetime import date, timedelta

from examplanner.scheduler.calendar import (
    each_week,
    format_day_month,
    week_days,
    week_end,
    week_start,
    weeks_for_range,
)


def test_week_start_and_end_are_monday_and_friday() -> None:
    # Wednesday and Sunday of the same ISO week
    assert week_start(date(2025, 3, 5)) == date(2025, 3, 3)
    assert week_start(date(2025, 3, 9)) == date(2025, 3, 3)
    assert week_start(date(2025, 3, 3)) == date(2025, 3, 3)
    assert week_end(date(2025, 3, 9)) == date(2025, 3, 7)
    assert week_end(date(2025, 3, 3)) == date(2025, 3, 7)


def test_single_week_for_any_date() -> None:
    d = date(2024, 12, 25)
    for i in range(60):
        day = d + timedelta(days=i)
        weeks = list(each_week(week_start(day), week_end(day)))
        assert weeks[0][0] == week_start(day)
        assert weeks[0][0].weekday() == 0
        assert weeks[-1][1] >= week_end(day)
        assert weeks[-1][1] < week_end(day) + timedelta(days=7)


def test_weeks_cover_multi_week_range() -> None:
    start, end = date(2025, 1, 15), date(2025, 2, 4)
    weeks = list(weeks_for_range(start, end))
    assert [m for m, _ in weeks] == [date(2025, 1, 13), date(2025, 1, 20), date(2025, 1, 27), date(2025, 2, 3)]
    assert all(f - m == timedelta(days=4) for m, f in weeks)
    assert end <= weeks[-1][1] < end + timedelta(days=7)


def test_each_week_is_restartable_and_empty_when_inverted() -> None:
    weeks = each_week(date(2025, 3, 3), date(2025, 3, 14))
    assert list(weeks) == list(weeks)
    assert len(list(weeks)) == 2
    assert list(each_week(date(2025, 3, 10), date(2025, 3, 7))) == []


def test_week_days_and_labels() -> None:
    days = week_days(date(2025, 3, 3))
    assert days[0] == date(2025, 3, 3) and days[-1] == date(2025, 3, 7)
    assert len(days) == 5
    assert format_day_month(days[-1]) == "07/03"
