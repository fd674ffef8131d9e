"""Parcel data models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from parcelmap.geo.models import GeoJSONPolygon, GeoPoint
from parcelmap.notes.models import LocationInfo


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ParcelQuery(BaseModel):
    """Hierarchical cadastral address submitted by a parcel search."""

    il: str = ""
    ilce: str = ""
    mahalle: str = ""
    ada: str = ""
    parsel: str | None = None

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("il", "ilce", "mahalle", "ada")
            if not getattr(self, name).strip()
        ]

    def address(self, region_suffix: str = "Türkiye") -> str:
        """Free-text address handed to the geocoder: neighborhood, district, province."""
        parts = [f"{self.mahalle.strip()} Mahallesi", self.ilce.strip(), self.il.strip()]
        if region_suffix:
            parts.append(region_suffix)
        return ", ".join(parts)


class EmbeddedNote(BaseModel):
    """Free-text note stored inside a parcel's ``notes`` array."""

    model_config = ConfigDict(populate_by_name=True)

    content: str
    user_id: str | None = Field(default=None, alias="userId")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")


class Parcel(BaseModel):
    """A located parcel with its (synthesized) boundary."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str | None = Field(default=None, alias="userId")
    il: str
    ilce: str
    mahalle: str
    ada: str
    parsel: str | None = None
    geometry: GeoJSONPolygon
    center: GeoPoint
    notes: list[EmbeddedNote] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    @property
    def location_info(self) -> LocationInfo:
        return LocationInfo(
            il=self.il,
            ilce=self.ilce,
            mahalle=self.mahalle,
            ada=self.ada,
            parsel=self.parsel or "",
        )

    def with_note(self, content: str, user_id: str | None = None) -> Parcel:
        """Return a copy with ``content`` appended to the notes array."""
        note = EmbeddedNote(content=content, user_id=user_id)
        return self.model_copy(
            update={"notes": [*self.notes, note], "updated_at": _utcnow()}
        )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
