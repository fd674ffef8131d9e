"""PostgreSQL-backed repository implementations."""

from parcelmap.repositories.postgres.notes import PostgresNoteRepository
from parcelmap.repositories.postgres.parcels import PostgresParcelRepository

__all__ = ["PostgresNoteRepository", "PostgresParcelRepository"]
