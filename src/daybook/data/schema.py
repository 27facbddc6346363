from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from ..domain import DEFAULT_CATEGORY, DEFAULT_COLOR, DEFAULT_TIMEZONE


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    username = Column(Text, unique=True, nullable=False)
    email = Column(Text, unique=True, nullable=False)
    created_at = Column(DateTime, nullable=False)

    events = relationship("EventRow", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)


class EventRow(Base):
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_user_id", "user_id"),
        Index("idx_events_date", "date"),
        Index("idx_events_user_date", "user_id", "date"),
    )

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    # ISO YYYY-MM-DD and zero-padded HH:MM; ordering by string is ordering by value.
    date = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    location = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=False, default=DEFAULT_CATEGORY)
    color = Column(Text, nullable=False, default=DEFAULT_COLOR)
    is_recurring = Column(Integer, nullable=False, default=0)
    recurrence_pattern = Column(Text, nullable=True)
    recurrence_end_date = Column(String(10), nullable=True)
    reminder_minutes = Column(Integer, nullable=True)
    timezone = Column(Text, nullable=False, default=DEFAULT_TIMEZONE)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    user = relationship("UserRow", back_populates="events")


def row_to_record(row: Base) -> dict:
    return {column.key: getattr(row, column.key) for column in row.__table__.columns}


__all__ = ["Base", "EventRow", "UserRow", "row_to_record"]
