from __future__ import annotations

from typing import Any, Dict, List

from ..domain import CATEGORY_COLORS, EventRecord
from ..services.window import MonthView
from .models import CategoryPayload, EventPayload, MonthViewPayload


def serialize_event(event: EventRecord) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_month_view(view: MonthView) -> Dict[str, Any]:
    return MonthViewPayload.from_domain(view).model_dump(by_alias=True)


def serialize_categories() -> List[Dict[str, Any]]:
    return [
        CategoryPayload(value=value, color=color).model_dump(by_alias=True)
        for value, color in CATEGORY_COLORS.items()
    ]
