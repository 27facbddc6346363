from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4

from sqlalchemy import delete as delete_rows, select

from ...domain import UserAccount, utc_now
from ..database import DatabaseGateway
from ..schema import UserRow, row_to_record


@dataclass(slots=True)
class UserRepository:
    """Minimal access to the user relation that owns events."""

    gateway: DatabaseGateway
    clock: Callable[[], datetime] = utc_now

    def create(self, username: str, email: str, *, user_id: Optional[str] = None) -> UserAccount:
        account = UserAccount(id=user_id or str(uuid4()), username=username, email=email, created_at=self.clock())
        with self.gateway.session() as session:
            row = UserRow(**account.to_record())
            session.add(row)
            session.flush()
            return UserAccount.from_record(row_to_record(row))

    def fetch(self, user_id: str) -> Optional[UserAccount]:
        with self.gateway.session() as session:
            row = session.get(UserRow, user_id)
            return UserAccount.from_record(row_to_record(row)) if row is not None else None

    def exists(self, user_id: str) -> bool:
        with self.gateway.session() as session:
            return session.execute(select(UserRow.id).where(UserRow.id == user_id)).first() is not None

    def delete(self, user_id: str) -> bool:
        """Remove a user; the store cascades the delete to their events."""

        with self.gateway.session() as session:
            result = session.execute(delete_rows(UserRow).where(UserRow.id == user_id))
            return bool(result.rowcount)
