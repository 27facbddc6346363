from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response, status

from ..domain import EventFilter, ValidationError, parse_date
from ..services import CalendarService, ServiceContext
from .models import EventCreateRequest, EventUpdateRequest
from .serializers import serialize_categories, serialize_event, serialize_month_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context


def get_calendar(context: ServiceContext = Depends(get_context)) -> CalendarService:
    return CalendarService(context)


def current_user_id(
    x_user_id: Optional[str] = Header(default=None),
    context: ServiceContext = Depends(get_context),
) -> str:
    """Identity comes from the authentication layer in front of this API."""

    if not x_user_id or not context.users.exists(x_user_id):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return x_user_id


@router.get("/health")
def health(context: ServiceContext = Depends(get_context)) -> Dict[str, Any]:
    return {"status": "ok", "database": context.gateway.is_open}


@router.get("/categories")
def list_categories() -> List[Dict[str, Any]]:
    return serialize_categories()


@router.get("/events")
def list_events(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    category: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> List[Dict[str, Any]]:
    event_filter = EventFilter.build(start_date=start_date, end_date=end_date, category=category, search=search)
    return [serialize_event(event) for event in calendar.list_events(user_id, event_filter)]


@router.get("/events/export/ical")
def export_ical(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> Response:
    window = EventFilter.build(start_date=start_date, end_date=end_date)
    document = calendar.export_feed(user_id, start_date=window.start_date, end_date=window.end_date)
    return Response(
        content=document.body,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.get("/events/{event_id}")
def get_event(
    event_id: str,
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> Dict[str, Any]:
    return serialize_event(calendar.get_event(user_id, event_id))


@router.post("/events", status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreateRequest,
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> Dict[str, Any]:
    event = calendar.create_event(user_id, payload.to_fields())
    logger.info("User %s created event %s", user_id, event.id)
    return serialize_event(event)


@router.put("/events/{event_id}")
def update_event(
    event_id: str,
    payload: EventUpdateRequest,
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> Dict[str, Any]:
    return serialize_event(calendar.update_event(user_id, event_id, payload.to_patch()))


@router.delete("/events/{event_id}")
def delete_event(
    event_id: str,
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> Dict[str, str]:
    calendar.delete_event(user_id, event_id)
    logger.info("User %s deleted event %s", user_id, event_id)
    return {"message": "Event deleted successfully"}


@router.get("/calendar/month")
def month_view(
    reference: Optional[str] = Query(default=None, alias="date"),
    category: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    user_id: str = Depends(current_user_id),
    calendar: CalendarService = Depends(get_calendar),
) -> Dict[str, Any]:
    if reference:
        try:
            target = parse_date(reference)
        except ValueError as exc:
            raise ValidationError({"date": str(exc)}) from exc
    else:
        target = date.today()
    view = calendar.month_view(user_id, target, category=category, search=search)
    return serialize_month_view(view)
