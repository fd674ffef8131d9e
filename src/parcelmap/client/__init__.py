"""HTTP client for the parcelmap REST API."""

from parcelmap.client.api import ParcelMapApi, ParcelMapClient

__all__ = ["ParcelMapApi", "ParcelMapClient"]
