"""Geocoding collaborator: resolves a free-text address to a center point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx
import yaml

from parcelmap.core.config import GeocodingConfig
from parcelmap.core.errors import TransportFailure
from parcelmap.geo.models import GeoPoint

logger = logging.getLogger(__name__)

_DEFAULT_FIXTURES_PATH = Path(__file__).resolve().parents[3] / "config" / "geocoding_fixtures.yml"

_NEIGHBORHOOD_SUFFIX = " mahallesi"


@runtime_checkable
class Geocoder(Protocol):
    """Protocol for geocoding services."""

    async def geocode(self, address: str) -> GeoPoint | None: ...

    async def close(self) -> None: ...


class GoogleGeocoder:
    """Talks to the Google Maps Geocoding JSON API."""

    def __init__(self, config: GeocodingConfig) -> None:
        if not config.api_key:
            raise ValueError("Google geocoding requires PARCELMAP_GEOCODING_API_KEY")
        self._config = config
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(config.timeout_seconds))
        self._max_retries = config.max_retries

    async def geocode(self, address: str) -> GeoPoint | None:
        data = await self._get({"address": address, "key": self._config.api_key})
        status = data.get("status", "OK")
        if status == "ZERO_RESULTS":
            return None
        if status != "OK":
            raise TransportFailure(
                f"Geocoding failed with status {status}: {data.get('error_message', '')}".strip()
            )
        results = data.get("results") or []
        if not results:
            return None
        location = results[0]["geometry"]["location"]
        return GeoPoint(lat=location["lat"], lng=location["lng"])

    async def close(self) -> None:
        await self._http.aclose()

    async def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._http.get(self._config.base_url, params=params)
            except httpx.TransportError as exc:
                if attempt < self._max_retries:
                    logger.warning("Geocoder transport error, retrying: %s", exc)
                    await asyncio.sleep(2**attempt * 0.5)
                    continue
                raise TransportFailure(f"Geocoder unreachable: {exc}") from exc
            if resp.status_code >= 500 and attempt < self._max_retries:
                logger.warning("Geocoder returned %d, retrying", resp.status_code)
                await asyncio.sleep(2**attempt * 0.5)
                continue
            if resp.status_code >= 400:
                raise TransportFailure(
                    f"Geocoder returned HTTP {resp.status_code}", status_code=resp.status_code
                )
            return resp.json()
        raise TransportFailure("Geocoder retries exhausted")


def _key(mahalle: str, ilce: str, il: str) -> tuple[str, str, str]:
    return (mahalle.strip().casefold(), ilce.strip().casefold(), il.strip().casefold())


class MockGeocoder:
    """Mock geocoder with fixture neighborhoods for development/testing.

    Understands addresses shaped like ``"Emek Mahallesi, Çankaya, Ankara, Türkiye"``.
    """

    def __init__(self, fixtures_path: str | Path | None = None) -> None:
        self._centers: dict[tuple[str, str, str], GeoPoint] = {}
        self._load_fixtures(Path(fixtures_path) if fixtures_path else _DEFAULT_FIXTURES_PATH)

    def _load_fixtures(self, path: Path) -> None:
        if not path.exists():
            return
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        for entry in data.get("locations", []):
            self.register(
                il=entry["il"],
                ilce=entry["ilce"],
                mahalle=entry["mahalle"],
                center=GeoPoint(lat=entry["lat"], lng=entry["lng"]),
            )

    def register(self, il: str, ilce: str, mahalle: str, center: GeoPoint) -> None:
        self._centers[_key(mahalle, ilce, il)] = center

    async def geocode(self, address: str) -> GeoPoint | None:
        parts = [p.strip() for p in address.split(",")]
        if len(parts) < 3:
            return None
        mahalle = parts[0]
        if mahalle.casefold().endswith(_NEIGHBORHOOD_SUFFIX):
            mahalle = mahalle[: -len(_NEIGHBORHOOD_SUFFIX)]
        return self._centers.get(_key(mahalle, parts[1], parts[2]))

    async def close(self) -> None:
        return None


GEOCODER_REGISTRY = {
    "mock": lambda config: MockGeocoder(fixtures_path=config.fixtures_path),
    "google": GoogleGeocoder,
}


def create_geocoder(config: GeocodingConfig) -> Geocoder:
    """Factory: select and instantiate a geocoder based on config.provider."""
    provider = config.provider.lower()
    if provider not in GEOCODER_REGISTRY:
        available = ", ".join(sorted(GEOCODER_REGISTRY))
        raise ValueError(
            f"Unknown geocoding provider {config.provider!r}. "
            f"Available: {available}"
        )
    return GEOCODER_REGISTRY[provider](config)
