from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import Select, delete as delete_rows, or_, select

from ...domain import EventFilter, EventPatch, EventRecord, NotFoundError, utc_now
from ..database import DatabaseGateway
from ..schema import EventRow, row_to_record

logger = logging.getLogger(__name__)


def _to_domain(row: EventRow) -> EventRecord:
    return EventRecord.from_record(row_to_record(row))


@dataclass(slots=True)
class EventRepository:
    gateway: DatabaseGateway
    clock: Callable[[], datetime] = utc_now

    def create(self, record: EventRecord) -> EventRecord:
        with self.gateway.session() as session:
            row = EventRow(**record.to_record())
            session.add(row)
            session.flush()
            stored = _to_domain(row)
        logger.debug("Created event %s for user %s", stored.id, stored.user_id)
        return stored

    def find_by_id(self, event_id: str) -> Optional[EventRecord]:
        """Fetch an event without any ownership check; see ``belongs_to_user``."""

        with self.gateway.session() as session:
            row = session.get(EventRow, event_id)
            return _to_domain(row) if row is not None else None

    def belongs_to_user(self, event_id: str, user_id: str) -> bool:
        query = select(EventRow.id).where(EventRow.id == event_id, EventRow.user_id == user_id)
        with self.gateway.session() as session:
            return session.execute(query).first() is not None

    def _listing_query(self, user_id: str, event_filter: EventFilter) -> Select:
        query = select(EventRow).where(EventRow.user_id == user_id)
        if event_filter.start_date:
            query = query.where(EventRow.date >= event_filter.start_date.isoformat())
        if event_filter.end_date:
            query = query.where(EventRow.date <= event_filter.end_date.isoformat())
        if event_filter.category:
            query = query.where(EventRow.category == event_filter.category)
        if event_filter.search:
            query = query.where(
                or_(
                    EventRow.title.icontains(event_filter.search, autoescape=True),
                    EventRow.description.icontains(event_filter.search, autoescape=True),
                )
            )
        return query.order_by(EventRow.date, EventRow.start_time, EventRow.created_at, EventRow.id)

    def list_by_user(self, user_id: str, event_filter: Optional[EventFilter] = None) -> List[EventRecord]:
        query = self._listing_query(user_id, event_filter or EventFilter())
        with self.gateway.session() as session:
            rows = session.execute(query).scalars().all()
            return [_to_domain(row) for row in rows]

    def update(self, event_id: str, patch: EventPatch) -> EventRecord:
        with self.gateway.session() as session:
            row = session.get(EventRow, event_id)
            if row is None:
                raise NotFoundError(event_id)
            current = _to_domain(row)
            if patch.is_empty:
                return current
            updated = patch.apply(current, updated_at=self.clock())
            values = updated.to_record()
            for key in ("id", "user_id", "created_at"):
                values.pop(key)
            for key, value in values.items():
                setattr(row, key, value)
            session.flush()
            stored = _to_domain(row)
        logger.debug("Updated event %s fields=%s", event_id, sorted(patch.changes()))
        return stored

    def delete(self, event_id: str) -> bool:
        """Hard delete. Returns whether a row was removed; a missing id is not an error."""

        with self.gateway.session() as session:
            result = session.execute(delete_rows(EventRow).where(EventRow.id == event_id))
            removed = bool(result.rowcount)
        logger.debug("Deleted event %s removed=%s", event_id, removed)
        return removed
