"""Parser for the literal ``[[lng, lat], [lng, lat], ...]`` coordinate text format."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from parcelmap.core.errors import MalformedCoordinateInput
from parcelmap.geo.models import GeoPoint, Polygon


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class CoordinateInputParser:
    """Turns a pasted array of ``[lng, lat]`` pairs into a :class:`Polygon`.

    Longitude comes first in the text, latitude first in :class:`GeoPoint`.
    A ring pasted in closed form (last pair equal to the first) is
    accepted and stored open.
    """

    def __init__(self, min_vertices: int = 3) -> None:
        self._min_vertices = min_vertices

    def parse(self, text: str) -> Polygon:
        """Parse ``text`` into an open ring.

        Raises:
            MalformedCoordinateInput: On invalid JSON, a non-array
                document, an element that is not a pair of numbers, a
                coordinate outside WGS84 range, or too few distinct vertices.
        """
        try:
            data = json.loads(text)
        except (ValueError, TypeError, RecursionError) as exc:
            raise MalformedCoordinateInput(f"Coordinate text is not valid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise MalformedCoordinateInput("Coordinate text must be an array of [lng, lat] pairs")

        points: list[GeoPoint] = []
        for index, element in enumerate(data):
            if not isinstance(element, list) or len(element) != 2:
                raise MalformedCoordinateInput(
                    f"Element {index} must be a [lng, lat] pair, got {element!r}"
                )
            if not all(_is_number(v) for v in element):
                raise MalformedCoordinateInput(
                    f"Element {index} must contain two numbers, got {element!r}"
                )
            try:
                points.append(GeoPoint.from_lnglat(element))
            except ValidationError as exc:
                raise MalformedCoordinateInput(
                    f"Element {index} is outside the valid lng/lat range: {element!r}"
                ) from exc

        polygon = Polygon.from_closed_ring(points)
        if not polygon.is_complete(self._min_vertices):
            raise MalformedCoordinateInput(
                f"A polygon needs at least {self._min_vertices} distinct vertices, "
                f"got {polygon.distinct_vertex_count}"
            )
        return polygon

    @staticmethod
    def serialize(polygon: Polygon, closed: bool = False) -> str:
        """Render ``polygon`` back into the text format."""
        return json.dumps(polygon.to_lnglat_pairs(closed=closed), separators=(",", ":"))
