"""PostgreSQL parcel repository."""

from __future__ import annotations

from parcelmap.core.errors import ParcelNotFound
from parcelmap.db.engine import DatabaseManager
from parcelmap.db.models import ParcelRow
from parcelmap.geo.models import GeoJSONPolygon, GeoPoint
from parcelmap.parcels.models import EmbeddedNote, Parcel


class PostgresParcelRepository:
    """Postgres-backed parcel storage. Geometry and notes are JSON columns."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def save(self, parcel: Parcel) -> Parcel:
        async with self._db.session() as db:
            existing = await db.get(ParcelRow, parcel.id)
            if existing:
                self._copy_to_row(parcel, existing)
            else:
                row = ParcelRow(id=parcel.id, created_at=parcel.created_at)
                self._copy_to_row(parcel, row)
                db.add(row)
            await db.commit()
        return parcel

    async def get(self, parcel_id: str) -> Parcel | None:
        async with self._db.session() as db:
            row = await db.get(ParcelRow, parcel_id)
            if row is None:
                return None
            return self._row_to_parcel(row)

    async def append_note(
        self, parcel_id: str, content: str, user_id: str | None = None
    ) -> Parcel:
        async with self._db.session() as db:
            row = await db.get(ParcelRow, parcel_id)
            if row is None:
                raise ParcelNotFound(parcel_id)
            parcel = self._row_to_parcel(row).with_note(content, user_id=user_id)
            self._copy_to_row(parcel, row)
            await db.commit()
        return parcel

    @staticmethod
    def _copy_to_row(parcel: Parcel, row: ParcelRow) -> None:
        row.user_id = parcel.user_id
        row.il = parcel.il
        row.ilce = parcel.ilce
        row.mahalle = parcel.mahalle
        row.ada = parcel.ada
        row.parsel = parcel.parsel
        row.geometry = parcel.geometry.model_dump()
        row.center_lat = parcel.center.lat
        row.center_lng = parcel.center.lng
        # a fresh list so the JSON column registers the change
        row.notes = [n.model_dump(mode="json", by_alias=True) for n in parcel.notes]
        row.updated_at = parcel.updated_at

    @staticmethod
    def _row_to_parcel(row: ParcelRow) -> Parcel:
        return Parcel(
            id=row.id,
            user_id=row.user_id,
            il=row.il,
            ilce=row.ilce,
            mahalle=row.mahalle,
            ada=row.ada,
            parsel=row.parsel,
            geometry=GeoJSONPolygon(**row.geometry),
            center=GeoPoint(lat=row.center_lat, lng=row.center_lng),
            notes=[EmbeddedNote.model_validate(n) for n in row.notes or []],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
