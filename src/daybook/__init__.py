"""Daybook: per-user calendar events, month views and iCalendar feeds."""

__version__ = "0.1.0"
