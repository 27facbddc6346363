"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext
from .feed import FeedDocument, FeedExporter

__all__ = ["CalendarService", "FeedDocument", "FeedExporter", "ServiceContext"]
