"""In-memory parcel repository."""

from __future__ import annotations

from parcelmap.core.errors import ParcelNotFound
from parcelmap.parcels.models import Parcel


class InMemoryParcelRepository:
    """In-memory store for parcels. Parcels are never deleted."""

    def __init__(self) -> None:
        self._parcels: dict[str, Parcel] = {}

    def save(self, parcel: Parcel) -> Parcel:
        self._parcels[parcel.id] = parcel
        return parcel

    def get(self, parcel_id: str) -> Parcel | None:
        return self._parcels.get(parcel_id)

    def append_note(self, parcel_id: str, content: str, user_id: str | None = None) -> Parcel:
        parcel = self._parcels.get(parcel_id)
        if parcel is None:
            raise ParcelNotFound(parcel_id)
        updated = parcel.with_note(content, user_id=user_id)
        self._parcels[parcel_id] = updated
        return updated

    @property
    def count(self) -> int:
        return len(self._parcels)
