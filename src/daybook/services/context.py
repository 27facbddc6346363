from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..config import AppSettings, get_settings
from ..data import DatabaseGateway
from ..data.repositories import EventRepository, UserRepository
from .feed import FeedExporter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root shared by services: settings, the store handle and repositories.

    Construct once per process, ``open()`` at start-up and ``close()`` on
    shutdown, then hand the same instance to every consumer.
    """

    settings: AppSettings = field(default_factory=get_settings)
    gateway: DatabaseGateway = field(init=False)
    events: EventRepository = field(init=False)
    users: UserRepository = field(init=False)
    feed: FeedExporter = field(init=False)

    def __post_init__(self) -> None:
        self.gateway = DatabaseGateway(self.settings.storage)
        self.events = EventRepository(gateway=self.gateway)
        self.users = UserRepository(gateway=self.gateway)
        self.feed = FeedExporter(settings=self.settings.feed)

    def open(self) -> "ServiceContext":
        self.gateway.open()
        return self

    def close(self) -> None:
        self.gateway.close()

    def __enter__(self) -> "ServiceContext":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()
