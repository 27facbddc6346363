from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..config import StorageSettings
from ..domain import DatabaseNotOpenError, StorageError
from .schema import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@dataclass
class DatabaseGateway:
    """Owns the engine for one process; opened at start-up and closed on shutdown."""

    settings: StorageSettings
    _engine: Optional[Engine] = field(default=None, repr=False)
    _sessions: Optional[sessionmaker] = field(default=None, repr=False)

    def open(self) -> "DatabaseGateway":
        if self._engine is not None:
            return self
        try:
            engine = create_engine(self.settings.database_url, echo=self.settings.echo)
            if self.settings.is_sqlite:
                event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            Base.metadata.create_all(engine)
        except SQLAlchemyError as exc:
            logger.exception("Failed to open database %s", self.settings.database_url)
            raise StorageError("Could not open the event store.") from exc
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info("Event store opened at %s", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("Event store closed")

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @contextmanager
    def session(self) -> Iterator[Session]:
        """One atomic unit of work: committed on success, rolled back on error."""

        if self._sessions is None:
            raise DatabaseNotOpenError("Event store is not open. Call open() first.")
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Event store operation failed")
            raise StorageError("Event store operation failed.") from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()


__all__ = ["DatabaseGateway"]
