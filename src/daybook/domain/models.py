from __future__ import annotations

import re
from dataclasses import dataclass, fields as dataclass_fields, replace
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, Mapping, Optional
from uuid import uuid4

from .enums import DEFAULT_CATEGORY, DEFAULT_COLOR, RecurrencePattern
from .errors import ValidationError

DEFAULT_TIMEZONE = "UTC"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _DATE_PATTERN.match(value.strip()):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"{value!r} is not a valid calendar date") from exc
    raise ValueError(f"{value!r} must be formatted YYYY-MM-DD")


def parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if isinstance(value, str):
        match = _TIME_PATTERN.match(value.strip())
        if match:
            return time(int(match.group(1)), int(match.group(2)))
    raise ValueError(f"{value!r} must be formatted HH:MM (24h)")


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _storage_timestamp(value: Optional[datetime]) -> Optional[datetime]:
    # Stored as naive UTC; the column carries no offset.
    if value is None:
        return None
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _clean_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Title is required")
    return value.strip()


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("must be text")
    return value


def _text_with_default(default: str) -> Callable[[Any], str]:
    def clean(value: Any) -> str:
        if value is None:
            return default
        if not isinstance(value, str):
            raise ValueError("must be text")
        return value.strip() or default

    return clean


def _clean_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError("must be a boolean")


def _clean_pattern(value: Any) -> Optional[RecurrencePattern]:
    if value is None or value == "":
        return None
    if isinstance(value, RecurrencePattern):
        return value
    try:
        return RecurrencePattern(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(pattern.value for pattern in RecurrencePattern)
        raise ValueError(f"must be one of {choices}") from exc


def _clean_optional_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    return parse_date(value)


def _clean_reminder(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError("must be a non-negative integer")
    return value


_CLEANERS: Dict[str, Callable[[Any], Any]] = {
    "title": _clean_title,
    "description": _clean_text,
    "date": parse_date,
    "start_time": parse_time,
    "end_time": parse_time,
    "location": _clean_text,
    "category": _text_with_default(DEFAULT_CATEGORY),
    "color": _text_with_default(DEFAULT_COLOR),
    "is_recurring": _clean_flag,
    "recurrence_pattern": _clean_pattern,
    "recurrence_end_date": _clean_optional_date,
    "reminder_minutes": _clean_reminder,
    "timezone": _text_with_default(DEFAULT_TIMEZONE),
}

EDITABLE_FIELDS = tuple(_CLEANERS)
REQUIRED_FIELDS = ("title", "date", "start_time", "end_time")


def clean_event_fields(fields: Mapping[str, Any], *, require: bool) -> Dict[str, Any]:
    """Normalize the editable fields present in ``fields``.

    Every malformed field is collected before raising, so a single
    :class:`ValidationError` names all of them.
    """

    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}
    for name, value in fields.items():
        cleaner = _CLEANERS.get(name)
        if cleaner is None:
            errors[name] = "is not an editable event field"
            continue
        try:
            cleaned[name] = cleaner(value)
        except ValueError as exc:
            errors[name] = str(exc)
    if require:
        for name in REQUIRED_FIELDS:
            if name not in fields:
                errors.setdefault(name, "Title is required" if name == "title" else "is required")
    if errors:
        raise ValidationError(errors)
    return cleaned


def _storage_value(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in ("date", "recurrence_end_date"):
        return value.isoformat()
    if name in ("start_time", "end_time"):
        return format_time(value)
    if name == "is_recurring":
        return 1 if value else 0
    if name == "recurrence_pattern":
        return value.value
    return value


@dataclass(frozen=True, slots=True)
class EventRecord:
    id: str
    user_id: str
    title: str
    date: date
    start_time: time
    end_time: time
    description: str = ""
    location: str = ""
    category: str = DEFAULT_CATEGORY
    color: str = DEFAULT_COLOR
    is_recurring: bool = False
    recurrence_pattern: Optional[RecurrencePattern] = None
    recurrence_end_date: Optional[date] = None
    reminder_minutes: Optional[int] = None
    timezone: str = DEFAULT_TIMEZONE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(
        cls,
        user_id: str,
        fields: Mapping[str, Any],
        *,
        event_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "EventRecord":
        """Build a fresh record from caller input, applying defaults for absent fields."""

        if not user_id:
            raise ValidationError({"user_id": "is required"})
        cleaned = clean_event_fields(fields, require=True)
        timestamp = now or utc_now()
        return cls(
            id=event_id or str(uuid4()),
            user_id=user_id,
            created_at=timestamp,
            updated_at=timestamp,
            **cleaned,
        )

    @property
    def starts_at(self) -> datetime:
        """Naive local start; interpret it in the ``timezone`` label."""
        return datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.date, self.end_time)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "EventRecord":
        pattern = record.get("recurrence_pattern")
        end_date = record.get("recurrence_end_date")
        return cls(
            id=str(record["id"]),
            user_id=str(record["user_id"]),
            title=str(record["title"]),
            date=parse_date(record["date"]),
            start_time=parse_time(record["start_time"]),
            end_time=parse_time(record["end_time"]),
            description=record.get("description") or "",
            location=record.get("location") or "",
            category=record.get("category") or DEFAULT_CATEGORY,
            color=record.get("color") or DEFAULT_COLOR,
            is_recurring=bool(record.get("is_recurring")),
            recurrence_pattern=RecurrencePattern(pattern) if pattern else None,
            recurrence_end_date=parse_date(end_date) if end_date else None,
            reminder_minutes=record.get("reminder_minutes"),
            timezone=record.get("timezone") or DEFAULT_TIMEZONE,
            created_at=_parse_timestamp(record.get("created_at")),
            updated_at=_parse_timestamp(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        record = {name: _storage_value(name, getattr(self, name)) for name in EDITABLE_FIELDS}
        record.update(
            id=self.id,
            user_id=self.user_id,
            created_at=_storage_timestamp(self.created_at),
            updated_at=_storage_timestamp(self.updated_at),
        )
        return record


@dataclass(frozen=True, slots=True)
class EventPatch:
    """Partial update; a field left as ``UNSET`` is not touched.

    ``UNSET`` is distinct from every real value, so clearing a text field
    with ``""`` or an optional field with ``None`` is an explicit change.
    """

    title: Any = UNSET
    description: Any = UNSET
    date: Any = UNSET
    start_time: Any = UNSET
    end_time: Any = UNSET
    location: Any = UNSET
    category: Any = UNSET
    color: Any = UNSET
    is_recurring: Any = UNSET
    recurrence_pattern: Any = UNSET
    recurrence_end_date: Any = UNSET
    reminder_minutes: Any = UNSET
    timezone: Any = UNSET

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any]) -> "EventPatch":
        return cls(**clean_event_fields(fields, require=False))

    def changes(self) -> Dict[str, Any]:
        return {
            item.name: getattr(self, item.name)
            for item in dataclass_fields(self)
            if getattr(self, item.name) is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()

    def to_record(self) -> Dict[str, Any]:
        return {name: _storage_value(name, value) for name, value in self.changes().items()}

    def apply(self, record: EventRecord, *, updated_at: datetime) -> EventRecord:
        if self.is_empty:
            return record
        return replace(record, updated_at=updated_at, **self.changes())


@dataclass(frozen=True, slots=True)
class EventFilter:
    """Optional listing constraints; ``None`` means no constraint on that dimension."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: Optional[str] = None
    search: Optional[str] = None

    @classmethod
    def build(
        cls,
        *,
        start_date: Any = None,
        end_date: Any = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> "EventFilter":
        errors: Dict[str, str] = {}
        parsed: Dict[str, Optional[date]] = {}
        for name, value in (("start_date", start_date), ("end_date", end_date)):
            try:
                parsed[name] = _clean_optional_date(value)
            except ValueError as exc:
                errors[name] = str(exc)
        if errors:
            raise ValidationError(errors)
        return cls(
            start_date=parsed["start_date"],
            end_date=parsed["end_date"],
            category=(category or "").strip() or None,
            search=(search or "").strip() or None,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.start_date or self.end_date or self.category or self.search)


@dataclass(frozen=True, slots=True)
class UserAccount:
    id: str
    username: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserAccount":
        return cls(
            id=str(record["id"]),
            username=str(record["username"]),
            email=str(record["email"]),
            created_at=_parse_timestamp(record.get("created_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "created_at": _storage_timestamp(self.created_at),
        }
