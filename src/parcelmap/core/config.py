"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class GeocodingConfig(BaseSettings):
    """Geocoding collaborator configuration."""

    model_config = {"env_prefix": "PARCELMAP_GEOCODING_"}

    provider: str = "mock"
    base_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    api_key: str | None = None
    fixtures_path: str | None = None
    region_suffix: str = "Türkiye"
    timeout_seconds: int = 10
    max_retries: int = 1


class ParcelConfig(BaseSettings):
    """Placeholder boundary synthesis configuration."""

    model_config = {"env_prefix": "PARCELMAP_PARCEL_"}

    # 0.001 degree is roughly 111 metres of latitude
    boundary_half_extent: float = 0.001


class MapConfig(BaseSettings):
    """Map view defaults."""

    model_config = {"env_prefix": "PARCELMAP_MAP_"}

    default_center_lat: float = 39.9334
    default_center_lng: float = 32.8597
    default_zoom: int = 6
    focus_zoom: int = 15
    min_polygon_vertices: int = 3


class DatabaseConfig(BaseSettings):
    """Database configuration. Without a URL, in-memory repositories are used."""

    model_config = {"env_prefix": "PARCELMAP_DB_"}

    database_url: str | None = None
    echo: bool = False
    pool_size: int = 5
    create_tables: bool = True


class AuthConfig(BaseSettings):
    """Authentication configuration."""

    model_config = {"env_prefix": "PARCELMAP_AUTH_"}

    enabled: bool = True
    fixtures_path: str | None = None


class ClientConfig(BaseSettings):
    """REST client configuration used by the map session."""

    model_config = {"env_prefix": "PARCELMAP_CLIENT_"}

    base_url: str = "http://localhost:8000"
    timeout_seconds: int = 10
    max_retries: int = 1


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "PARCELMAP_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    parcel: ParcelConfig = Field(default_factory=ParcelConfig)
    map: MapConfig = Field(default_factory=MapConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
