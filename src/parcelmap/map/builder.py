"""In-progress polygon construction from map clicks."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from parcelmap.geo.models import GeoPoint, Polygon

logger = logging.getLogger(__name__)


class CompletedPolygon(BaseModel):
    """A promoted ring together with the anchor for its note prompt."""

    polygon: Polygon
    centroid: GeoPoint


class PolygonBuilder:
    """Accumulates clicked vertices into a working ring.

    There is no upper bound on the vertex count. A ring is only promoted
    by :meth:`complete` once it has ``min_vertices`` distinct vertices.
    """

    def __init__(self, min_vertices: int = 3) -> None:
        self._min_vertices = min_vertices
        self._working: list[GeoPoint] = []

    @property
    def vertices(self) -> tuple[GeoPoint, ...]:
        return tuple(self._working)

    @property
    def min_vertices(self) -> int:
        return self._min_vertices

    @property
    def is_empty(self) -> bool:
        return not self._working

    def add_vertex(self, point: GeoPoint) -> int:
        """Append ``point`` to the working ring and return the new vertex count."""
        self._working.append(point)
        return len(self._working)

    def complete(self) -> CompletedPolygon | None:
        """Promote the working ring if it is a valid shape.

        Returns None and leaves the working ring untouched when there are
        too few distinct vertices. Otherwise resets the working ring. A ring
        closed by clicking the first vertex again is stored open.
        """
        polygon = Polygon.from_closed_ring(self._working)
        if not polygon.is_complete(self._min_vertices):
            logger.debug(
                "Polygon not completed: %d distinct vertices, need %d",
                polygon.distinct_vertex_count,
                self._min_vertices,
            )
            return None
        self._working = []
        return CompletedPolygon(polygon=polygon, centroid=polygon.centroid())

    def cancel(self) -> int:
        """Discard the working ring. Returns the number of vertices dropped."""
        dropped = len(self._working)
        self._working = []
        return dropped
