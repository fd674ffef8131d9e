"""In-memory note repository."""

from __future__ import annotations

from parcelmap.core.errors import NoteNotFound
from parcelmap.notes.models import Note, NoteInput


class InMemoryNoteRepository:
    """In-memory store for notes, keyed by id in creation order."""

    def __init__(self) -> None:
        self._notes: dict[str, Note] = {}

    def list_all(self) -> list[Note]:
        return list(self._notes.values())

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def create(self, data: NoteInput) -> Note:
        note = Note(
            content=data.content,
            position=data.position,
            location_info=data.location_info,
        )
        self._notes[note.id] = note
        return note

    def update(self, note_id: str, data: NoteInput) -> Note:
        existing = self._notes.get(note_id)
        if existing is None:
            raise NoteNotFound(note_id)
        note = existing.revised(data)
        self._notes[note_id] = note
        return note

    def delete(self, note_id: str) -> Note:
        note = self._notes.pop(note_id, None)
        if note is None:
            raise NoteNotFound(note_id)
        return note

    @property
    def count(self) -> int:
        return len(self._notes)
