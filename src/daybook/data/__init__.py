"""Data access layer."""

from __future__ import annotations

from .database import DatabaseGateway
from .schema import Base, EventRow, UserRow

__all__ = ["Base", "DatabaseGateway", "EventRow", "UserRow"]
