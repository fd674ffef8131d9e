"""Note data models.

Notes are their own collection, bound to a map position and optionally to
the cadastral address (il/ilce/mahalle/ada/parsel) the user was viewing.
Field names serialize in camelCase on the wire.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from parcelmap.geo.models import GeoPoint


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocationInfo(BaseModel):
    """Administrative address of a cadastral parcel."""

    il: str = ""
    ilce: str = ""
    mahalle: str = ""
    ada: str = ""
    parsel: str = ""


class NoteInput(BaseModel):
    """Body of note create and update requests."""

    model_config = ConfigDict(populate_by_name=True)

    content: str
    position: GeoPoint
    location_info: LocationInfo | None = Field(default=None, alias="locationInfo")

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Note content must not be empty")
        return value


class Note(NoteInput):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def revised(self, changes: NoteInput) -> Note:
        """Return a copy with ``changes`` applied and ``updatedAt`` reset."""
        return self.model_copy(
            update={
                "content": changes.content,
                "position": changes.position,
                "location_info": changes.location_info,
                "updated_at": _utcnow(),
            }
        )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
