from __future__ import annotations

from typing import Dict, Mapping, Optional


class DaybookError(Exception):
    """Base class for every error raised by the event core."""


class ValidationError(DaybookError, ValueError):
    """Raised when event input is malformed or a required field is missing."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors: Dict[str, str] = dict(errors)
        details = "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"Invalid event input ({details})" if details else "Invalid event input")

    @property
    def fields(self) -> list[str]:
        return list(self.errors)


class NotFoundError(DaybookError, LookupError):
    """Raised when no event exists with the requested id."""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found.")


class ForbiddenError(DaybookError, PermissionError):
    """Raised when an event exists but belongs to another user."""

    def __init__(self, event_id: str, user_id: Optional[str] = None) -> None:
        self.event_id = event_id
        self.user_id = user_id
        super().__init__(f"Event {event_id} does not belong to the requesting user.")


class StorageError(DaybookError, RuntimeError):
    """Raised when the durable store fails."""


class DatabaseNotOpenError(StorageError):
    """Raised when the store is used before ``open()`` or after ``close()``."""


__all__ = [
    "DaybookError",
    "DatabaseNotOpenError",
    "ForbiddenError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
