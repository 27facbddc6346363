"""Month-view day grid and the projection of an event listing onto it.

Weeks start on Sunday. Everything here is pure: no store access, no
mutation of the events passed in.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from ..domain import EventRecord

SUNDAY = 6  # date.weekday() numbering


def _date_range(start: date, end: date) -> Iterable[date]:
    delta = (end - start).days
    for index in range(delta + 1):
        yield start + timedelta(days=index)


def month_bounds(reference: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last_day)


def month_grid(reference: date, *, week_start: int = SUNDAY) -> List[date]:
    """Whole weeks covering the month of ``reference`` (28 to 42 days)."""

    first, last = month_bounds(reference)
    grid_start = first - timedelta(days=(first.weekday() - week_start) % 7)
    grid_end = last + timedelta(days=(week_start - 1 - last.weekday()) % 7)
    return list(_date_range(grid_start, grid_end))


def bucket(events: Iterable[EventRecord], day: date) -> List[EventRecord]:
    return [event for event in events if event.date == day]


def in_month(day: date, reference: date) -> bool:
    return (day.year, day.month) == (reference.year, reference.month)


def is_today(day: date, *, today: Optional[date] = None) -> bool:
    return day == (today or date.today())


def shift_month(reference: date, months: int) -> date:
    """Move by whole months, clamping the day (31 January + 1 month is 29 February in leap years)."""

    index = reference.year * 12 + (reference.month - 1) + months
    year, month = divmod(index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(reference.day, last_day))


@dataclass(frozen=True, slots=True)
class DayCell:
    day: date
    in_month: bool
    is_today: bool
    events: Tuple[EventRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class MonthView:
    reference: date
    weeks: Tuple[Tuple[DayCell, ...], ...]

    @property
    def days(self) -> List[DayCell]:
        return [cell for week in self.weeks for cell in week]

    @property
    def previous_month(self) -> date:
        return shift_month(self.reference, -1)

    @property
    def next_month(self) -> date:
        return shift_month(self.reference, 1)


def build_month_view(
    reference: date,
    events: Sequence[EventRecord],
    *,
    today: Optional[date] = None,
    week_start: int = SUNDAY,
) -> MonthView:
    current = today or date.today()
    cells = [
        DayCell(
            day=day,
            in_month=in_month(day, reference),
            is_today=is_today(day, today=current),
            events=tuple(bucket(events, day)),
        )
        for day in month_grid(reference, week_start=week_start)
    ]
    weeks = tuple(tuple(cells[index : index + 7]) for index in range(0, len(cells), 7))
    return MonthView(reference=reference, weeks=weeks)
