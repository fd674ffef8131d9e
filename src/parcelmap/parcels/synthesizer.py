"""Placeholder parcel boundary synthesis from a geocoded address.

The boundary produced here is NOT a surveyed cadastral boundary. It is a
fixed-size axis-aligned square around the geocoded neighborhood center,
standing in until a real boundary source is wired in.
"""

from __future__ import annotations

import logging
from typing import Any

from parcelmap.core.config import ParcelConfig
from parcelmap.core.errors import LocationNotFound
from parcelmap.geo.models import GeoJSONPolygon, GeoPoint
from parcelmap.parcels.geocoding import Geocoder
from parcelmap.parcels.models import Parcel, ParcelQuery
from parcelmap.repositories import resolve

logger = logging.getLogger(__name__)


def square_ring(center: GeoPoint, half_extent: float) -> GeoJSONPolygon:
    """Closed square ring of ``half_extent`` degrees around ``center``.

    Corners run SW, SE, NE, NW and the SW corner is repeated to close it.
    """
    west, east = center.lng - half_extent, center.lng + half_extent
    south, north = center.lat - half_extent, center.lat + half_extent
    ring = [
        [west, south],
        [east, south],
        [east, north],
        [west, north],
        [west, south],
    ]
    return GeoJSONPolygon(coordinates=[ring])


class ParcelBoundarySynthesizer:
    """Resolves a hierarchical address and persists a placeholder parcel.

    Args:
        geocoder: Collaborator that turns the free-text address into a center.
        repository: Parcel store, in-memory (sync) or Postgres (async).
        config: Boundary size configuration.
        region_suffix: Appended to the address sent to the geocoder.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        repository: Any,
        config: ParcelConfig | None = None,
        region_suffix: str = "Türkiye",
    ) -> None:
        self._geocoder = geocoder
        self._repository = repository
        self._config = config or ParcelConfig()
        self._region_suffix = region_suffix

    async def locate(self, query: ParcelQuery) -> GeoPoint:
        """Resolve the query's neighborhood to a center point.

        Raises:
            ValueError: If a required address part is blank.
            LocationNotFound: If the geocoder has no result.
        """
        missing = query.missing_fields()
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        address = query.address(self._region_suffix)
        center = await self._geocoder.geocode(address)
        if center is None:
            raise LocationNotFound(address)
        return center

    async def synthesize(self, query: ParcelQuery, user_id: str | None = None) -> Parcel:
        """Locate ``query``, build its square boundary and persist the parcel."""
        center = await self.locate(query)
        parcel = Parcel(
            user_id=user_id,
            il=query.il,
            ilce=query.ilce,
            mahalle=query.mahalle,
            ada=query.ada,
            parsel=query.parsel,
            geometry=square_ring(center, self._config.boundary_half_extent),
            center=center,
        )
        saved = await resolve(self._repository.save(parcel))
        logger.info(
            "Created parcel %s for %s/%s/%s ada=%s parsel=%s",
            saved.id,
            query.il,
            query.ilce,
            query.mahalle,
            query.ada,
            query.parsel,
        )
        return saved
