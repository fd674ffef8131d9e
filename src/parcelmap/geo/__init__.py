"""Geometry value types and the typed coordinate parser."""

from parcelmap.geo.models import BoundingBox, GeoJSONPolygon, GeoPoint, Polygon
from parcelmap.geo.parser import CoordinateInputParser

__all__ = ["BoundingBox", "CoordinateInputParser", "GeoJSONPolygon", "GeoPoint", "Polygon"]
