from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain import EventPatch, EventRecord, format_time
from ..services.window import DayCell, MonthView


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class EventPayload(CamelModel):
    id: str
    user_id: str
    title: str
    description: str = Field(default="")
    date: str
    start_time: str
    end_time: str
    location: str = Field(default="")
    category: str
    color: str
    is_recurring: bool = Field(default=False)
    recurrence_pattern: Optional[str] = Field(default=None)
    recurrence_end_date: Optional[str] = Field(default=None)
    reminder_minutes: Optional[int] = Field(default=None)
    timezone: str
    created_at: Optional[str] = Field(default=None)
    updated_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, event: EventRecord) -> "EventPayload":
        return cls(
            id=event.id,
            user_id=event.user_id,
            title=event.title,
            description=event.description,
            date=event.date.isoformat(),
            start_time=format_time(event.start_time),
            end_time=format_time(event.end_time),
            location=event.location,
            category=event.category,
            color=event.color,
            is_recurring=event.is_recurring,
            recurrence_pattern=event.recurrence_pattern.value if event.recurrence_pattern else None,
            recurrence_end_date=event.recurrence_end_date.isoformat() if event.recurrence_end_date else None,
            reminder_minutes=event.reminder_minutes,
            timezone=event.timezone,
            created_at=_iso(event.created_at),
            updated_at=_iso(event.updated_at),
        )


class EventFieldsRequest(CamelModel):
    """Event input as sent by clients; field checks happen in the domain layer."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[str] = None
    recurrence_end_date: Optional[str] = None
    reminder_minutes: Optional[int] = None
    timezone: Optional[str] = None

    def supplied_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class EventCreateRequest(EventFieldsRequest):
    def to_fields(self) -> Dict[str, Any]:
        fields = self.supplied_fields()
        # A JSON false/null for the flag means "not recurring".
        if fields.get("is_recurring") is None:
            fields.pop("is_recurring", None)
        return fields


class EventUpdateRequest(EventFieldsRequest):
    def to_patch(self) -> EventPatch:
        return EventPatch.from_mapping(self.supplied_fields())


class DayCellPayload(CamelModel):
    day: str
    in_month: bool
    is_today: bool
    events: List[EventPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, cell: DayCell) -> "DayCellPayload":
        return cls(
            day=cell.day.isoformat(),
            in_month=cell.in_month,
            is_today=cell.is_today,
            events=[EventPayload.from_domain(event) for event in cell.events],
        )


class MonthViewPayload(CamelModel):
    reference: str
    previous_month: str
    next_month: str
    weeks: List[List[DayCellPayload]]

    @classmethod
    def from_domain(cls, view: MonthView) -> "MonthViewPayload":
        return cls(
            reference=view.reference.isoformat(),
            previous_month=view.previous_month.isoformat(),
            next_month=view.next_month.isoformat(),
            weeks=[[DayCellPayload.from_domain(cell) for cell in week] for week in view.weeks],
        )


class CategoryPayload(CamelModel):
    value: str
    color: str


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
