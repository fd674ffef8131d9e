"""Client-side note store: the local view of the note collection.

Every mutation round-trips through the REST API first. The local cache
only changes after the server confirms, so a failed call leaves the last
known-good state in place.
"""

from __future__ import annotations

import logging

from parcelmap.client.api import ParcelMapApi
from parcelmap.geo.models import GeoPoint
from parcelmap.notes.models import LocationInfo, Note, NoteInput

logger = logging.getLogger(__name__)


class NoteStore:
    """Local cache of notes, kept in server order."""

    def __init__(self, api: ParcelMapApi) -> None:
        self._api = api
        self._notes: dict[str, Note] = {}
        self._load_seq = 0
        # confirmed mutations recorded per in-flight load, replayed onto its result
        self._journals: dict[int, list[tuple[str, Note | None]]] = {}

    @property
    def notes(self) -> list[Note]:
        return list(self._notes.values())

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def __len__(self) -> int:
        return len(self._notes)

    async def load(self) -> list[Note]:
        """Replace the cache with the server's note list.

        Creates, updates and deletes confirmed while the list was in flight
        are replayed on top of it, so an older snapshot never drops them. A
        list that arrives after a newer load was issued is discarded.
        """
        self._load_seq += 1
        seq = self._load_seq
        journal: list[tuple[str, Note | None]] = []
        self._journals[seq] = journal
        try:
            notes = await self._api.list_notes()
        finally:
            del self._journals[seq]

        if seq != self._load_seq:
            logger.debug("Discarding superseded note list (load %d)", seq)
            return self.notes
        loaded = {n.id: n for n in notes}
        for note_id, note in journal:
            if note is None:
                loaded.pop(note_id, None)
            else:
                loaded[note_id] = note
        self._notes = loaded
        return self.notes

    async def create(
        self,
        content: str,
        position: GeoPoint,
        location_info: LocationInfo | None = None,
    ) -> Note:
        data = NoteInput(content=content, position=position, location_info=location_info)
        note = await self._api.create_note(data)
        self._apply(note.id, note)
        return note

    async def update(
        self,
        note_id: str,
        content: str,
        position: GeoPoint | None = None,
        location_info: LocationInfo | None = None,
    ) -> Note:
        """Edit a note. Position and location info default to the cached values.

        Raises:
            ValueError: If ``position`` is omitted for a note that is not cached.
            NoteNotFound: If the server has no such note.
        """
        cached = self._notes.get(note_id)
        if position is None:
            if cached is None:
                raise ValueError(f"Position is required to update uncached note {note_id!r}")
            position = cached.position
        if location_info is None and cached is not None:
            location_info = cached.location_info

        data = NoteInput(content=content, position=position, location_info=location_info)
        note = await self._api.update_note(note_id, data)
        self._apply(note.id, note)
        return note

    async def delete(self, note_id: str) -> None:
        await self._api.delete_note(note_id)
        self._apply(note_id, None)
        logger.debug("Deleted note %s", note_id)

    def _apply(self, note_id: str, note: Note | None) -> None:
        """Record a confirmed change; None marks a deletion."""
        if note is None:
            self._notes.pop(note_id, None)
        else:
            self._notes[note_id] = note
        for journal in self._journals.values():
            journal.append((note_id, note))
