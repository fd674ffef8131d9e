"""Core type definitions shared across parcelmap modules."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ToolMode(StrEnum):
    """Interaction modes of the map view. Exactly one is active at a time."""

    PAN = "pan"
    MARKER = "marker"
    POLYGON = "polygon"
    COORDINATE = "coordinate"
    INPUT = "input"


class OverlayKind(StrEnum):
    """Kinds of overlay the map view renders."""

    PARCEL_BOUNDARY = "parcel_boundary"
    USER_POLYGON = "user_polygon"
    NOTE_MARKER = "note_marker"


def envelope(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Build a successful response body."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body
