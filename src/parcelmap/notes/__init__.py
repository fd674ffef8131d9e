"""Free-text map notes anchored at a position."""

from parcelmap.notes.models import LocationInfo, Note, NoteInput
from parcelmap.notes.store import InMemoryNoteRepository

__all__ = ["InMemoryNoteRepository", "LocationInfo", "Note", "NoteInput"]
