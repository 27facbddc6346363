"""Domain models for calendar events."""

from __future__ import annotations

from .enums import (
    CATEGORY_COLORS,
    DEFAULT_CATEGORY,
    DEFAULT_COLOR,
    KnownCategory,
    RecurrencePattern,
    default_color_for,
)
from .errors import (
    DatabaseNotOpenError,
    DaybookError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .models import (
    DEFAULT_TIMEZONE,
    UNSET,
    EventFilter,
    EventPatch,
    EventRecord,
    UserAccount,
    format_time,
    parse_date,
    parse_time,
    utc_now,
)

__all__ = [
    "CATEGORY_COLORS",
    "DEFAULT_CATEGORY",
    "DEFAULT_COLOR",
    "DEFAULT_TIMEZONE",
    "DatabaseNotOpenError",
    "DaybookError",
    "EventFilter",
    "EventPatch",
    "EventRecord",
    "ForbiddenError",
    "KnownCategory",
    "NotFoundError",
    "RecurrencePattern",
    "StorageError",
    "UNSET",
    "UserAccount",
    "ValidationError",
    "default_color_for",
    "format_time",
    "parse_date",
    "parse_time",
    "utc_now",
]
