"""Occurrence expansion for recurring events.

Kept apart from storage, listing and feed export: those treat the
recurrence fields as stored metadata only.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List

from icalendar import Calendar as ICalCalendar, Event as ICalEvent
from recurring_ical_events import of as recurring_events_of

from .models import EventRecord


def _as_calendar(event: EventRecord) -> ICalCalendar:
    vevent = ICalEvent()
    vevent.add("uid", event.id)
    vevent.add("summary", event.title)
    vevent.add("dtstart", event.starts_at)
    if event.ends_at > event.starts_at:
        vevent.add("dtend", event.ends_at)
    rule = {"freq": event.recurrence_pattern.value.upper()}
    if event.recurrence_end_date:
        rule["until"] = datetime.combine(event.recurrence_end_date, event.start_time)
    vevent.add("rrule", rule)

    vcal = ICalCalendar()
    vcal.add("prodid", "-//Daybook//recurrence//EN")
    vcal.add("version", "2.0")
    vcal.add_component(vevent)
    return vcal


def occurrences_within(event: EventRecord, start: date, end: date) -> List[date]:
    """Dates on which ``event`` occurs between ``start`` and ``end`` inclusive.

    Monthly and yearly rules follow RFC 5545: a start on the 31st skips
    months without one, a start on 29 February only recurs in leap years.
    """

    if end < start:
        return []
    if not event.is_recurring or event.recurrence_pattern is None:
        return [event.date] if start <= event.date <= end else []

    expanded = recurring_events_of(_as_calendar(event)).between(start, end + timedelta(days=1))
    days = set()
    for occurrence in expanded:
        value = occurrence["DTSTART"].dt
        day = value.date() if isinstance(value, datetime) else value
        if start <= day <= end:
            days.add(day)
    return sorted(days)
