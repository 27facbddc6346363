from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "Daybook"
APP_AUTHOR = "Daybook"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))


@dataclass(frozen=True)
class StorageSettings:
    database_url: str
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@dataclass(frozen=True)
class FeedSettings:
    name: str
    prodid: str
    organizer_name: str
    organizer_email: str


@dataclass(frozen=True)
class HttpSettings:
    host: str
    port: int
    mask_forbidden: bool = False


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    storage: StorageSettings
    feed: FeedSettings
    http: HttpSettings
    logging: LoggingSettings


def _bool_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def default_database_url() -> str:
    return f"sqlite:///{DATA_DIR / 'daybook.db'}"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    storage = StorageSettings(
        database_url=os.getenv("DAYBOOK_DATABASE_URL") or default_database_url(),
        echo=_bool_from_env("DAYBOOK_DATABASE_ECHO", False),
    )

    feed = FeedSettings(
        name=os.getenv("DAYBOOK_FEED_NAME", "My Calendar"),
        prodid=os.getenv("DAYBOOK_FEED_PRODID", "-//Daybook//daybook//EN"),
        organizer_name=os.getenv("DAYBOOK_FEED_ORGANIZER_NAME", "Calendar App"),
        organizer_email=os.getenv("DAYBOOK_FEED_ORGANIZER_EMAIL", "noreply@calendar.app"),
    )

    http = HttpSettings(
        host=os.getenv("DAYBOOK_HTTP_HOST", "127.0.0.1"),
        port=_int_from_env("DAYBOOK_HTTP_PORT", 8000),
        mask_forbidden=_bool_from_env("DAYBOOK_MASK_FORBIDDEN", False),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("DAYBOOK_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("DAYBOOK_LOG_DIR") or DATA_DIR / "logs"),
    )

    return AppSettings(storage=storage, feed=feed, http=http, logging=logging_settings)
