"""FastAPI router for the note collection."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from parcelmap.core.errors import NoteNotFound
from parcelmap.core.types import envelope
from parcelmap.notes.models import NoteInput
from parcelmap.repositories import resolve

logger = logging.getLogger(__name__)

router = APIRouter()


def _repository(request: Request) -> Any:
    repository = getattr(request.app.state, "note_repository", None)
    if repository is None:
        raise HTTPException(status_code=503, detail="Note store not available")
    return repository


@router.get("/api/notes")
async def list_notes(request: Request) -> dict[str, Any]:
    """List every note."""
    notes = await resolve(_repository(request).list_all())
    return envelope([n.to_wire() for n in notes])


@router.post("/api/notes")
async def create_note(body: NoteInput, request: Request) -> dict[str, Any]:
    """Create a note at a map position."""
    note = await resolve(_repository(request).create(body))
    return envelope(note.to_wire())


@router.put("/api/notes/{note_id}")
async def update_note(note_id: str, body: NoteInput, request: Request) -> dict[str, Any]:
    """Replace a note's content, position and location info."""
    try:
        note = await resolve(_repository(request).update(note_id, body))
    except NoteNotFound:
        raise HTTPException(status_code=404, detail=f"Note {note_id!r} not found")
    return envelope(note.to_wire())


@router.delete("/api/notes/{note_id}")
async def delete_note(note_id: str, request: Request) -> dict[str, Any]:
    """Delete a note."""
    try:
        await resolve(_repository(request).delete(note_id))
    except NoteNotFound:
        raise HTTPException(status_code=404, detail=f"Note {note_id!r} not found")
    logger.info("Deleted note %s", note_id)
    return envelope(message="Note deleted")
