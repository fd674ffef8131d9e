"""SQLAlchemy ORM models for all persistent tables."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from parcelmap.db.base import Base


def _jsonb() -> type:
    """Return JSONB for Postgres, plain JSON for SQLite."""
    return JSON().with_variant(PG_JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class NoteRow(Base):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    content: Mapped[str] = mapped_column(Text)
    lat: Mapped[float] = mapped_column(Float)
    lng: Mapped[float] = mapped_column(Float)
    location_info: Mapped[dict | None] = mapped_column(_jsonb(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_notes_created_at", "created_at"),
    )


# ---------------------------------------------------------------------------
# Parcels
# ---------------------------------------------------------------------------


class ParcelRow(Base):
    __tablename__ = "parcels"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    il: Mapped[str] = mapped_column(String(128))
    ilce: Mapped[str] = mapped_column(String(128))
    mahalle: Mapped[str] = mapped_column(String(128))
    ada: Mapped[str] = mapped_column(String(32))
    parsel: Mapped[str | None] = mapped_column(String(32), nullable=True)
    geometry: Mapped[dict] = mapped_column(_jsonb())
    center_lat: Mapped[float] = mapped_column(Float)
    center_lng: Mapped[float] = mapped_column(Float)
    notes: Mapped[list] = mapped_column(_jsonb(), default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("ix_parcels_user_id", "user_id"),
        Index("ix_parcels_address", "il", "ilce", "mahalle", "ada"),
    )
