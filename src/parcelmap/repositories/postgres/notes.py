"""PostgreSQL note repository."""

from __future__ import annotations

from sqlalchemy import func, select

from parcelmap.core.errors import NoteNotFound
from parcelmap.db.engine import DatabaseManager
from parcelmap.db.models import NoteRow
from parcelmap.geo.models import GeoPoint
from parcelmap.notes.models import LocationInfo, Note, NoteInput


class PostgresNoteRepository:
    """Postgres-backed note storage."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def list_all(self) -> list[Note]:
        async with self._db.session() as db:
            result = await db.execute(select(NoteRow).order_by(NoteRow.created_at))
            return [self._row_to_note(r) for r in result.scalars().all()]

    async def get(self, note_id: str) -> Note | None:
        async with self._db.session() as db:
            row = await db.get(NoteRow, note_id)
            if row is None:
                return None
            return self._row_to_note(row)

    async def create(self, data: NoteInput) -> Note:
        note = Note(
            content=data.content,
            position=data.position,
            location_info=data.location_info,
        )
        async with self._db.session() as db:
            db.add(
                NoteRow(
                    id=note.id,
                    content=note.content,
                    lat=note.position.lat,
                    lng=note.position.lng,
                    location_info=self._location_json(note.location_info),
                    created_at=note.created_at,
                    updated_at=note.updated_at,
                )
            )
            await db.commit()
        return note

    async def update(self, note_id: str, data: NoteInput) -> Note:
        async with self._db.session() as db:
            row = await db.get(NoteRow, note_id)
            if row is None:
                raise NoteNotFound(note_id)
            note = self._row_to_note(row).revised(data)
            row.content = note.content
            row.lat = note.position.lat
            row.lng = note.position.lng
            row.location_info = self._location_json(note.location_info)
            row.updated_at = note.updated_at
            await db.commit()
        return note

    async def delete(self, note_id: str) -> Note:
        async with self._db.session() as db:
            row = await db.get(NoteRow, note_id)
            if row is None:
                raise NoteNotFound(note_id)
            note = self._row_to_note(row)
            await db.delete(row)
            await db.commit()
        return note

    async def async_count(self) -> int:
        async with self._db.session() as db:
            result = await db.execute(select(func.count()).select_from(NoteRow))
            return result.scalar_one()

    @staticmethod
    def _location_json(info: LocationInfo | None) -> dict | None:
        return info.model_dump() if info is not None else None

    @staticmethod
    def _row_to_note(row: NoteRow) -> Note:
        return Note(
            id=row.id,
            content=row.content,
            position=GeoPoint(lat=row.lat, lng=row.lng),
            location_info=LocationInfo(**row.location_info) if row.location_info else None,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
