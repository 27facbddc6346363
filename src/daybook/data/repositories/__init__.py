"""Repositories for first-class domain objects."""

from __future__ import annotations

from .events import EventRepository
from .users import UserRepository

__all__ = ["EventRepository", "UserRepository"]
