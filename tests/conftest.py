import itertools
from datetime import datetime, timedelta, timezone

import pytest

from daybook.config import AppSettings, FeedSettings, HttpSettings, LoggingSettings, StorageSettings
from daybook.domain import EventRecord
from daybook.services import CalendarService, ServiceContext

BASE_TIME = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        storage=StorageSettings(database_url=f"sqlite:///{tmp_path / 'daybook.db'}"),
        feed=FeedSettings(
            name="My Calendar",
            prodid="-//Daybook//tests//EN",
            organizer_name="Calendar App",
            organizer_email="noreply@calendar.app",
        ),
        http=HttpSettings(host="127.0.0.1", port=8000),
        logging=LoggingSettings(level="DEBUG", directory=tmp_path / "logs"),
    )


@pytest.fixture
def clock():
    """Deterministic clock advancing one second per call."""
    ticks = itertools.count()
    return lambda: BASE_TIME + timedelta(seconds=next(ticks))


@pytest.fixture
def context(settings, clock):
    service_context = ServiceContext(settings=settings)
    service_context.events.clock = clock
    service_context.users.clock = clock
    with service_context:
        yield service_context


@pytest.fixture
def events(context):
    return context.events


@pytest.fixture
def calendar(context) -> CalendarService:
    return CalendarService(context)


@pytest.fixture
def user(context) -> str:
    return context.users.create("alice", "alice@example.com", user_id="user-a").id


@pytest.fixture
def other_user(context) -> str:
    return context.users.create("bob", "bob@example.com", user_id="user-b").id


@pytest.fixture
def make_event(clock):
    def factory(user_id: str, **overrides) -> EventRecord:
        fields = {
            "title": "Team Sync",
            "date": "2024-03-05",
            "start_time": "09:00",
            "end_time": "09:30",
        }
        fields.update(overrides)
        return EventRecord.new(user_id, fields, now=clock())

    return factory
