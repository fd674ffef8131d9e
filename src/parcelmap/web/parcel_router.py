"""FastAPI router for parcel search, lookup and embedded notes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from parcelmap.auth.middleware import current_user
from parcelmap.core.errors import LocationNotFound, ParcelNotFound, TransportFailure
from parcelmap.core.types import envelope
from parcelmap.parcels.models import ParcelQuery
from parcelmap.repositories import resolve

logger = logging.getLogger(__name__)

router = APIRouter()


class AddParcelNoteRequest(BaseModel):
    note: str


@router.post("/api/parcels/search")
async def search_parcel(
    body: ParcelQuery,
    request: Request,
    user_id: str | None = Depends(current_user),
) -> dict[str, Any]:
    """Locate a parcel by address and persist its placeholder boundary."""
    synthesizer = getattr(request.app.state, "parcel_synthesizer", None)
    if synthesizer is None:
        raise HTTPException(status_code=503, detail="Parcel search not available")

    try:
        parcel = await synthesizer.synthesize(body, user_id=user_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except LocationNotFound:
        raise HTTPException(status_code=404, detail="Location not found")
    except TransportFailure as exc:
        logger.warning("Geocoding failed for parcel search: %s", exc)
        raise HTTPException(status_code=502, detail="Geocoding service unavailable")

    return envelope(parcel.to_wire())


@router.get("/api/parcels/{parcel_id}", dependencies=[Depends(current_user)])
async def get_parcel(parcel_id: str, request: Request) -> dict[str, Any]:
    """Get a parcel with its boundary and notes."""
    repository = request.app.state.parcel_repository
    parcel = await resolve(repository.get(parcel_id))
    if parcel is None:
        raise HTTPException(status_code=404, detail=f"Parcel {parcel_id!r} not found")
    return envelope(parcel.to_wire())


@router.post("/api/parcels/{parcel_id}/notes")
async def add_parcel_note(
    parcel_id: str,
    body: AddParcelNoteRequest,
    request: Request,
    user_id: str | None = Depends(current_user),
) -> dict[str, Any]:
    """Append a note to a parcel's embedded notes array."""
    if not body.note.strip():
        raise HTTPException(status_code=400, detail="Note must not be empty")

    repository = request.app.state.parcel_repository
    try:
        parcel = await resolve(repository.append_note(parcel_id, body.note, user_id=user_id))
    except ParcelNotFound:
        raise HTTPException(status_code=404, detail=f"Parcel {parcel_id!r} not found")
    return envelope(parcel.to_wire())
