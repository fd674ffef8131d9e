"""FastAPI application for parcelmap.

Provides the note collection, parcel search and parcel note endpoints
consumed by the map annotation client, plus a health check.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from parcelmap.auth.middleware import AuthMiddleware
from parcelmap.auth.provider import MockAuthProvider
from parcelmap.core.config import Settings
from parcelmap.notes.store import InMemoryNoteRepository
from parcelmap.parcels.geocoding import Geocoder, create_geocoder
from parcelmap.parcels.store import InMemoryParcelRepository
from parcelmap.parcels.synthesizer import ParcelBoundarySynthesizer
from parcelmap.web.note_router import router as note_router
from parcelmap.web.parcel_router import router as parcel_router

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = "0.1.0"
    storage: str


def create_app(
    settings: Settings | None = None,
    geocoder: Geocoder | None = None,
    auth_provider: Any | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with mock collaborators.

    Args:
        settings: Application settings. Defaults to Settings().
        geocoder: Optional pre-built geocoder. Defaults to the configured provider.
        auth_provider: Optional pre-built token provider.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("parcelmap").setLevel(settings.log_level.upper())

    if geocoder is None:
        geocoder = create_geocoder(settings.geocoding)

    if auth_provider is None:
        auth_provider = MockAuthProvider(fixtures_path=settings.auth.fixtures_path)

    db_manager = None
    if settings.db.database_url:
        from parcelmap.db.engine import DatabaseManager
        from parcelmap.repositories.postgres.notes import PostgresNoteRepository
        from parcelmap.repositories.postgres.parcels import PostgresParcelRepository

        db_manager = DatabaseManager.from_config(settings.db)
        note_repository: Any = PostgresNoteRepository(db_manager)
        parcel_repository: Any = PostgresParcelRepository(db_manager)
    else:
        note_repository = InMemoryNoteRepository()
        parcel_repository = InMemoryParcelRepository()

    synthesizer = ParcelBoundarySynthesizer(
        geocoder=geocoder,
        repository=parcel_repository,
        config=settings.parcel,
        region_suffix=settings.geocoding.region_suffix,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if db_manager is not None and settings.db.create_tables:
            await db_manager.create_tables()
        try:
            yield
        finally:
            await geocoder.close()
            if db_manager is not None:
                await db_manager.close()

    app = FastAPI(
        title="parcelmap",
        description="Cadastral parcel lookup and map annotation API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AuthMiddleware)

    # Store on app state for access in route handlers
    app.state.settings = settings
    app.state.geocoder = geocoder
    app.state.auth_provider = auth_provider
    app.state.note_repository = note_repository
    app.state.parcel_repository = parcel_repository
    app.state.parcel_synthesizer = synthesizer
    if db_manager is not None:
        app.state.db_manager = db_manager

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Any, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    app.include_router(note_router)
    app.include_router(parcel_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="parcelmap",
            storage="postgres" if db_manager is not None else "memory",
        )

    return app
