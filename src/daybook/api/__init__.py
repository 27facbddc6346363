"""HTTP-facing payload models, serializers and routes."""

from __future__ import annotations

from .routes import router

__all__ = ["router"]
