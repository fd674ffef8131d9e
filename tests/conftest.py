"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from parcelmap.core.config import AuthConfig, Settings
from parcelmap.core.errors import LocationNotFound, ParcelMapError, ParcelNotFound
from parcelmap.geo.models import GeoPoint
from parcelmap.notes.models import Note, NoteInput
from parcelmap.notes.store import InMemoryNoteRepository
from parcelmap.parcels.geocoding import MockGeocoder
from parcelmap.parcels.models import Parcel, ParcelQuery
from parcelmap.parcels.synthesizer import square_ring
from parcelmap.web.app import create_app


# Token from config/auth_fixtures.yml
AYSE_TOKEN = "dev-token-ayse"
AYSE_USER_ID = "ayse.yilmaz"

EMEK_QUERY = {
    "il": "Ankara",
    "ilce": "Çankaya",
    "mahalle": "Emek",
    "ada": "123",
    "parsel": "45",
}


def auth_headers(token: str = AYSE_TOKEN) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def note_body(content: str = "Fence needs repair", lat: float = 39.92, lng: float = 32.85) -> dict:
    return {"content": content, "position": {"lat": lat, "lng": lng}}


@pytest.fixture
def geocoder() -> MockGeocoder:
    geo = MockGeocoder()
    geo.register("Ankara", "Çankaya", "Emek", GeoPoint(lat=39.92, lng=32.85))
    return geo


@pytest.fixture
def client(geocoder: MockGeocoder) -> TestClient:
    app = create_app(settings=Settings(), geocoder=geocoder)
    return TestClient(app)


@pytest.fixture
def open_client(geocoder: MockGeocoder) -> TestClient:
    """App with authentication turned off."""
    settings = Settings(auth=AuthConfig(enabled=False))
    return TestClient(create_app(settings=settings, geocoder=geocoder))


class FakeParcelMapApi:
    """In-process stand-in for the REST client.

    ``list_gate`` holds back the note list after its snapshot is taken.
    ``search_gates`` holds an :class:`asyncio.Event` per mahalle; a search
    for that mahalle waits for the event, which lets tests control the
    order in which overlapping searches complete.
    """

    def __init__(self) -> None:
        self.repository = InMemoryNoteRepository()
        self.parcels: dict[str, Parcel] = {}
        self.centers = {"emek": GeoPoint(lat=39.92, lng=32.85)}
        self.search_gates: dict[str, asyncio.Event] = {}
        self.list_gate: asyncio.Event | None = None
        self.fail_with: ParcelMapError | None = None
        self.calls: list[str] = []

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_notes(self) -> list[Note]:
        self._check("list_notes")
        snapshot = self.repository.list_all()
        if self.list_gate is not None:
            await self.list_gate.wait()
        return snapshot

    async def create_note(self, data: NoteInput) -> Note:
        self._check("create_note")
        return self.repository.create(data)

    async def update_note(self, note_id: str, data: NoteInput) -> Note:
        self._check("update_note")
        return self.repository.update(note_id, data)

    async def delete_note(self, note_id: str) -> None:
        self._check("delete_note")
        self.repository.delete(note_id)

    async def search_parcel(self, query: ParcelQuery) -> Parcel:
        self._check("search_parcel")
        gate = self.search_gates.get(query.mahalle.casefold())
        if gate is not None:
            await gate.wait()
        center = self.centers.get(query.mahalle.casefold())
        if center is None:
            raise LocationNotFound(query.address())
        parcel = Parcel(
            il=query.il,
            ilce=query.ilce,
            mahalle=query.mahalle,
            ada=query.ada,
            parsel=query.parsel,
            geometry=square_ring(center, 0.001),
            center=center,
        )
        self.parcels[parcel.id] = parcel
        return parcel

    async def get_parcel(self, parcel_id: str) -> Parcel:
        self._check("get_parcel")
        if parcel_id not in self.parcels:
            raise ParcelNotFound(parcel_id)
        return self.parcels[parcel_id]

    async def add_parcel_note(self, parcel_id: str, note: str) -> Parcel:
        self._check("add_parcel_note")
        parcel = (await self.get_parcel(parcel_id)).with_note(note)
        self.parcels[parcel_id] = parcel
        return parcel


@pytest.fixture
def fake_api() -> FakeParcelMapApi:
    return FakeParcelMapApi()
