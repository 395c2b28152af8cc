from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..core.enums import WeekDay


@dataclass(frozen=True)
class WeekDate:
    """One concrete date of the current week.

    ``is_today`` and ``is_past`` are computed against the ``now`` the week was built from.
    """

    date: date
    day: WeekDay
    is_today: bool
    is_past: bool

    @property
    def name(self) -> str:
        return self.day.label


def _as_date(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def current_week(now: date | datetime) -> list[WeekDate]:
    """The 7 dates of the Sunday-start week containing ``now``."""
    today = _as_date(now)
    start = today - timedelta(days=int(WeekDay.from_date(today)))

    week: list[WeekDate] = []
    for day in WeekDay:
        d = start + timedelta(days=int(day))
        week.append(WeekDate(date=d, day=day, is_today=d == today, is_past=d < today))
    return week


def week_date_for(day: WeekDay, now: date | datetime) -> WeekDate:
    return current_week(now)[int(WeekDay.parse(day))]
