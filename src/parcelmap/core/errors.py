"""Error kinds shared by the map client and the parcel/note service.

Every failure is scoped to the operation that raised it; none of these
is fatal to the process.
"""

from __future__ import annotations


class ParcelMapError(Exception):
    """Base class for all parcelmap errors."""


class MalformedCoordinateInput(ParcelMapError, ValueError):
    """Coordinate text could not be parsed into a ring of [lng, lat] pairs."""


class LocationNotFound(ParcelMapError):
    """The geocoding collaborator returned no result for an address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Location not found: {address!r}")
        self.address = address


class NoteNotFound(ParcelMapError):
    """Update or delete target note does not exist."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note {note_id!r} not found")
        self.note_id = note_id


class ParcelNotFound(ParcelMapError):
    def __init__(self, parcel_id: str) -> None:
        super().__init__(f"Parcel {parcel_id!r} not found")
        self.parcel_id = parcel_id


class Unauthorized(ParcelMapError):
    """Session is absent or expired."""


class TransportFailure(ParcelMapError):
    """Network or server error on a collaborator call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
