"""Async REST client for the note and parcel endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol, runtime_checkable

import httpx

from parcelmap.core.config import ClientConfig
from parcelmap.core.errors import (
    LocationNotFound,
    NoteNotFound,
    ParcelMapError,
    ParcelNotFound,
    TransportFailure,
    Unauthorized,
)
from parcelmap.notes.models import Note, NoteInput
from parcelmap.parcels.models import Parcel, ParcelQuery

logger = logging.getLogger(__name__)

ErrorFactory = Callable[[], ParcelMapError]


@runtime_checkable
class ParcelMapApi(Protocol):
    """What the map session needs from the backend."""

    async def list_notes(self) -> list[Note]: ...

    async def create_note(self, data: NoteInput) -> Note: ...

    async def update_note(self, note_id: str, data: NoteInput) -> Note: ...

    async def delete_note(self, note_id: str) -> None: ...

    async def search_parcel(self, query: ParcelQuery) -> Parcel: ...

    async def get_parcel(self, parcel_id: str) -> Parcel: ...

    async def add_parcel_note(self, parcel_id: str, note: str) -> Parcel: ...


class ParcelMapClient:
    """Talks to the parcelmap REST API.

    HTTP 401 raises :class:`Unauthorized`; 404 raises the not-found error
    of the endpoint; server and network errors are retried up to
    ``max_retries`` times, then raise :class:`TransportFailure`.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        config = config or ClientConfig()
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            headers=headers,
            transport=transport,
        )
        self._max_retries = config.max_retries

    # -- notes ---------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        data = await self._request("GET", "/api/notes")
        return [Note.model_validate(n) for n in data or []]

    async def create_note(self, data: NoteInput) -> Note:
        body = await self._request("POST", "/api/notes", json=self._note_body(data))
        return Note.model_validate(body)

    async def update_note(self, note_id: str, data: NoteInput) -> Note:
        body = await self._request(
            "PUT",
            f"/api/notes/{note_id}",
            json=self._note_body(data),
            errors={404: lambda: NoteNotFound(note_id)},
        )
        return Note.model_validate(body)

    async def delete_note(self, note_id: str) -> None:
        await self._request(
            "DELETE",
            f"/api/notes/{note_id}",
            errors={404: lambda: NoteNotFound(note_id)},
        )

    # -- parcels -------------------------------------------------------------

    async def search_parcel(self, query: ParcelQuery) -> Parcel:
        address = query.address()
        body = await self._request(
            "POST",
            "/api/parcels/search",
            json=query.model_dump(),
            errors={
                400: lambda: LocationNotFound(address),
                404: lambda: LocationNotFound(address),
            },
        )
        return Parcel.model_validate(body)

    async def get_parcel(self, parcel_id: str) -> Parcel:
        body = await self._request(
            "GET",
            f"/api/parcels/{parcel_id}",
            errors={404: lambda: ParcelNotFound(parcel_id)},
        )
        return Parcel.model_validate(body)

    async def add_parcel_note(self, parcel_id: str, note: str) -> Parcel:
        body = await self._request(
            "POST",
            f"/api/parcels/{parcel_id}/notes",
            json={"note": note},
            errors={404: lambda: ParcelNotFound(parcel_id)},
        )
        return Parcel.model_validate(body)

    async def close(self) -> None:
        await self._http.aclose()

    # -- internal ------------------------------------------------------------

    @staticmethod
    def _note_body(data: NoteInput) -> dict[str, Any]:
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        errors: dict[int, ErrorFactory] | None = None,
    ) -> Any:
        errors = errors or {}
        resp = await self._send(method, path, json)

        if resp.status_code == 401:
            raise Unauthorized("Session is missing or expired")
        if resp.status_code in errors:
            raise errors[resp.status_code]()
        if resp.status_code >= 400:
            raise TransportFailure(
                f"{method} {path} failed with HTTP {resp.status_code}: {self._message(resp)}",
                status_code=resp.status_code,
            )

        payload = resp.json()
        if not payload.get("success", False):
            raise TransportFailure(f"{method} {path} failed: {payload.get('message', '')}")
        return payload.get("data")

    async def _send(self, method: str, path: str, json: dict[str, Any] | None) -> httpx.Response:
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._http.request(method, path, json=json)
            except httpx.TransportError as exc:
                if attempt < self._max_retries:
                    logger.warning("%s %s transport error, retrying: %s", method, path, exc)
                    await asyncio.sleep(2**attempt * 0.5)
                    continue
                raise TransportFailure(f"{method} {path} failed: {exc}") from exc
            if resp.status_code >= 500 and attempt < self._max_retries:
                logger.warning("%s %s returned %d, retrying", method, path, resp.status_code)
                await asyncio.sleep(2**attempt * 0.5)
                continue
            return resp
        raise TransportFailure(f"{method} {path} retries exhausted")

    @staticmethod
    def _message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text
        return str(body.get("message", "")) if isinstance(body, dict) else resp.text
