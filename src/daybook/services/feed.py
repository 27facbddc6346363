from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from icalendar import Calendar as ICalCalendar, Event as ICalEvent, vCalAddress, vText

from ..config import FeedSettings
from ..domain import EventRecord

logger = logging.getLogger(__name__)

FEED_MEDIA_TYPE = "text/calendar"
FEED_FILENAME = "calendar.ics"


@dataclass(frozen=True, slots=True)
class FeedDocument:
    body: str
    media_type: str = FEED_MEDIA_TYPE
    filename: str = FEED_FILENAME


@dataclass(slots=True)
class FeedExporter:
    """Serialize events into an iCalendar feed.

    Start and end are written as floating (naive) local times built from the
    event's date and wall-clock times; nothing is converted to UTC. Consumers
    must read them in the event's timezone label, which each component carries
    as ``X-DAYBOOK-TIMEZONE``. ``DTSTAMP`` is the event's last update, so the
    same ordered input always yields the same bytes.
    """

    settings: FeedSettings

    def _organizer(self) -> vCalAddress:
        organizer = vCalAddress(f"mailto:{self.settings.organizer_email}")
        organizer.params["cn"] = vText(self.settings.organizer_name)
        return organizer

    def _component(self, event: EventRecord) -> ICalEvent:
        vevent = ICalEvent()
        vevent.add("uid", event.id)
        stamp = event.updated_at or event.created_at
        if stamp is not None:
            vevent.add("dtstamp", stamp)
        vevent.add("dtstart", event.starts_at)
        vevent.add("dtend", event.ends_at)
        vevent.add("summary", event.title)
        vevent.add("description", event.description)
        vevent.add("location", event.location)
        vevent["organizer"] = self._organizer()
        vevent.add("x-daybook-timezone", event.timezone)
        return vevent

    def export(self, events: Iterable[EventRecord]) -> str:
        vcal = ICalCalendar()
        vcal.add("prodid", self.settings.prodid)
        vcal.add("version", "2.0")
        vcal.add("calscale", "GREGORIAN")
        vcal.add("name", self.settings.name)
        vcal.add("x-wr-calname", self.settings.name)
        count = 0
        for event in events:
            vcal.add_component(self._component(event))
            count += 1
        logger.debug("Exported %d events to feed %r", count, self.settings.name)
        return vcal.to_ical().decode("utf-8")
