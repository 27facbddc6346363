from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional, Union

from ..domain import EventFilter, EventPatch, EventRecord, ForbiddenError, NotFoundError
from .context import ServiceContext
from .feed import FeedDocument
from .window import MonthView, build_month_view, month_bounds

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    """Per-user operations on events; every call is scoped to ``user_id``."""

    context: ServiceContext

    def _require_owned(self, user_id: str, event_id: str) -> None:
        if self.context.events.belongs_to_user(event_id, user_id):
            return
        if self.context.events.find_by_id(event_id) is None:
            raise NotFoundError(event_id)
        logger.warning("User %s denied access to event %s", user_id, event_id)
        raise ForbiddenError(event_id, user_id)

    def list_events(self, user_id: str, event_filter: Optional[EventFilter] = None) -> List[EventRecord]:
        return self.context.events.list_by_user(user_id, event_filter)

    def get_event(self, user_id: str, event_id: str) -> EventRecord:
        event = self.context.events.find_by_id(event_id)
        if event is None:
            raise NotFoundError(event_id)
        if event.user_id != user_id:
            logger.warning("User %s denied access to event %s", user_id, event_id)
            raise ForbiddenError(event_id, user_id)
        return event

    def create_event(self, user_id: str, fields: Mapping[str, Any]) -> EventRecord:
        record = EventRecord.new(user_id, fields, now=self.context.events.clock())
        return self.context.events.create(record)

    def update_event(
        self,
        user_id: str,
        event_id: str,
        changes: Union[EventPatch, Mapping[str, Any]],
    ) -> EventRecord:
        patch = changes if isinstance(changes, EventPatch) else EventPatch.from_mapping(changes)
        self._require_owned(user_id, event_id)
        return self.context.events.update(event_id, patch)

    def delete_event(self, user_id: str, event_id: str) -> bool:
        self._require_owned(user_id, event_id)
        self.context.events.delete(event_id)
        return True

    def export_feed(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> FeedDocument:
        events = self.list_events(user_id, EventFilter(start_date=start_date, end_date=end_date))
        return FeedDocument(body=self.context.feed.export(events))

    def month_view(
        self,
        user_id: str,
        reference: date,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        today: Optional[date] = None,
    ) -> MonthView:
        first, last = month_bounds(reference)
        listing = self.list_events(
            user_id,
            EventFilter.build(start_date=first, end_date=last, category=category, search=search),
        )
        return build_month_view(reference, listing, today=today)
