"""Protocol definitions for the note and parcel repositories.

Each protocol mirrors the public methods of the in-memory store class,
so the sync (in-memory) and async (Postgres) implementations satisfy the
same interface. Callers wrap results in :func:`parcelmap.repositories.resolve`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from parcelmap.notes.models import Note, NoteInput
from parcelmap.parcels.models import Parcel


@runtime_checkable
class NoteRepository(Protocol):
    """Protocol for note storage. Update and delete raise NoteNotFound."""

    def list_all(self) -> list[Note]: ...

    def get(self, note_id: str) -> Note | None: ...

    def create(self, data: NoteInput) -> Note: ...

    def update(self, note_id: str, data: NoteInput) -> Note: ...

    def delete(self, note_id: str) -> Note: ...


@runtime_checkable
class ParcelRepository(Protocol):
    """Protocol for parcel storage. append_note raises ParcelNotFound."""

    def save(self, parcel: Parcel) -> Parcel: ...

    def get(self, parcel_id: str) -> Parcel | None: ...

    def append_note(
        self, parcel_id: str, content: str, user_id: str | None = None
    ) -> Parcel: ...
