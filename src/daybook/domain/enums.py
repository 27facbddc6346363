from __future__ import annotations

from enum import Enum
from typing import Optional


class RecurrencePattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class KnownCategory(str, Enum):
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"
    HEALTH = "health"
    FAMILY = "family"
    OTHER = "other"


DEFAULT_CATEGORY = KnownCategory.PERSONAL.value
DEFAULT_COLOR = "#3b82f6"

CATEGORY_COLORS = {
    KnownCategory.WORK.value: "#ef4444",
    KnownCategory.PERSONAL.value: "#3b82f6",
    KnownCategory.STUDY.value: "#10b981",
    KnownCategory.HEALTH.value: "#f59e0b",
    KnownCategory.FAMILY.value: "#8b5cf6",
    KnownCategory.OTHER.value: "#6b7280",
}


def default_color_for(category: Optional[str]) -> str:
    """Palette color for a known category, falling back to the default color."""

    return CATEGORY_COLORS.get(category or "", DEFAULT_COLOR)
