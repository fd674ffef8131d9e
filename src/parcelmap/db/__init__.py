"""Database layer for parcelmap (SQLAlchemy 2.0 async)."""

from __future__ import annotations

from parcelmap.db.base import Base
from parcelmap.db.engine import DatabaseManager

__all__ = ["Base", "DatabaseManager"]
