"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    DATA_DIR,
    AppSettings,
    FeedSettings,
    HttpSettings,
    LoggingSettings,
    StorageSettings,
    default_database_url,
    get_settings,
)

__all__ = [
    "DATA_DIR",
    "AppSettings",
    "FeedSettings",
    "HttpSettings",
    "LoggingSettings",
    "StorageSettings",
    "default_database_url",
    "get_settings",
]
