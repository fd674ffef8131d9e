"""Geometry value types: points, vertex rings, bounding boxes and GeoJSON polygons."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeoPoint(BaseModel):
    """A WGS84 position. Latitude first, unlike the [lng, lat] text and GeoJSON formats."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)

    @classmethod
    def from_lnglat(cls, pair: list[float] | tuple[float, float]) -> GeoPoint:
        return cls(lat=pair[1], lng=pair[0])

    def to_lnglat(self) -> list[float]:
        return [self.lng, self.lat]


class BoundingBox(BaseModel):
    """Axis-aligned extent used to frame the map view around a shape."""

    model_config = ConfigDict(frozen=True)

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            lat=(self.min_lat + self.max_lat) / 2,
            lng=(self.min_lng + self.max_lng) / 2,
        )

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.min_lat <= point.lat <= self.max_lat
            and self.min_lng <= point.lng <= self.max_lng
        )


class Polygon(BaseModel):
    """An ordered vertex ring. Insertion order is significant.

    In memory the ring is open: the first vertex is not repeated. The
    closed form (first vertex repeated as last) is produced on
    serialization via :meth:`closed_ring` and :meth:`to_geojson`.
    """

    model_config = ConfigDict(frozen=True)

    vertices: tuple[GeoPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def distinct_vertex_count(self) -> int:
        return len(set(self.vertices))

    def is_complete(self, min_vertices: int = 3) -> bool:
        """A completed ring has at least ``min_vertices`` distinct vertices."""
        return self.distinct_vertex_count >= min_vertices

    def closed_ring(self) -> list[GeoPoint]:
        ring = list(self.vertices)
        if ring and ring[0] != ring[-1]:
            ring.append(ring[0])
        return ring

    def centroid(self) -> GeoPoint:
        """Arithmetic mean of the vertex latitudes and longitudes.

        This is a vertex average, not the area-weighted polygon centroid.
        It is close enough to anchor a note prompt inside small convex
        shapes, which is all it is used for.
        """
        if not self.vertices:
            raise ValueError("Cannot compute the centroid of an empty ring")
        count = len(self.vertices)
        return GeoPoint(
            lat=sum(v.lat for v in self.vertices) / count,
            lng=sum(v.lng for v in self.vertices) / count,
        )

    def bounding_box(self) -> BoundingBox:
        if not self.vertices:
            raise ValueError("Cannot compute the bounding box of an empty ring")
        lats = [v.lat for v in self.vertices]
        lngs = [v.lng for v in self.vertices]
        return BoundingBox(
            min_lat=min(lats), max_lat=max(lats), min_lng=min(lngs), max_lng=max(lngs)
        )

    def to_lnglat_pairs(self, closed: bool = False) -> list[list[float]]:
        ring = self.closed_ring() if closed else list(self.vertices)
        return [v.to_lnglat() for v in ring]

    def to_geojson(self) -> GeoJSONPolygon:
        return GeoJSONPolygon(coordinates=[self.to_lnglat_pairs(closed=True)])

    @classmethod
    def from_closed_ring(cls, ring: list[GeoPoint]) -> Polygon:
        """Build an open ring, dropping the repeated closing vertex if present."""
        if len(ring) > 1 and ring[0] == ring[-1]:
            ring = ring[:-1]
        return cls(vertices=tuple(ring))


class GeoJSONPolygon(BaseModel):
    """GeoJSON Polygon geometry. Only the exterior ring is used."""

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[list[float]]]

    @field_validator("coordinates")
    @classmethod
    def _exterior_ring_closed(cls, value: list[list[list[float]]]) -> list[list[list[float]]]:
        if not value:
            raise ValueError("Polygon geometry requires an exterior ring")
        exterior = value[0]
        if len(exterior) < 4:
            raise ValueError("Exterior ring needs at least 4 positions")
        if exterior[0] != exterior[-1]:
            raise ValueError("Exterior ring must be closed (first == last)")
        return value

    @property
    def exterior(self) -> Polygon:
        return Polygon.from_closed_ring([GeoPoint.from_lnglat(p) for p in self.coordinates[0]])
