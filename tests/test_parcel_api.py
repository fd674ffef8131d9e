"""API tests for parcel search, lookup and embedded notes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from parcelmap.core.config import Settings
from parcelmap.core.errors import TransportFailure
from parcelmap.web.app import create_app
from tests.conftest import AYSE_USER_ID, EMEK_QUERY, auth_headers


class FailingGeocoder:
    async def geocode(self, address: str):
        raise TransportFailure("geocoder down")

    async def close(self) -> None:
        return None


class TestParcelSearch:
    def test_requires_auth(self, client: TestClient) -> None:
        resp = client.post("/api/parcels/search", json=EMEK_QUERY)
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Authentication required"}
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, client: TestClient) -> None:
        resp = client.post(
            "/api/parcels/search", json=EMEK_QUERY, headers=auth_headers("bogus")
        )
        assert resp.status_code == 401

    def test_search_synthesizes_boundary(self, client: TestClient) -> None:
        resp = client.post("/api/parcels/search", json=EMEK_QUERY, headers=auth_headers())
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        data = body["data"]
        assert data["userId"] == AYSE_USER_ID
        assert data["center"] == {"lat": 39.92, "lng": 32.85}
        assert data["geometry"]["type"] == "Polygon"
        ring = data["geometry"]["coordinates"][0]
        assert len(ring) == 5
        assert ring[0] == ring[-1]
        assert ring[0] == pytest.approx([32.849, 39.919])
        assert ring[2] == pytest.approx([32.851, 39.921])
        assert data["notes"] == []

    def test_missing_field(self, client: TestClient) -> None:
        resp = client.post(
            "/api/parcels/search",
            json={**EMEK_QUERY, "mahalle": ""},
            headers=auth_headers(),
        )
        assert resp.status_code == 400
        assert "mahalle" in resp.json()["message"]

    def test_ada_is_required(self, client: TestClient) -> None:
        query = {k: v for k, v in EMEK_QUERY.items() if k != "ada"}
        resp = client.post("/api/parcels/search", json=query, headers=auth_headers())
        assert resp.status_code == 400
        assert "ada" in resp.json()["message"]

    def test_location_not_found(self, client: TestClient) -> None:
        resp = client.post(
            "/api/parcels/search",
            json={**EMEK_QUERY, "mahalle": "Yok"},
            headers=auth_headers(),
        )
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Location not found"}

    def test_geocoder_failure(self) -> None:
        client = TestClient(create_app(settings=Settings(), geocoder=FailingGeocoder()))
        resp = client.post("/api/parcels/search", json=EMEK_QUERY, headers=auth_headers())
        assert resp.status_code == 502

    def test_no_auth_variant(self, open_client: TestClient) -> None:
        resp = open_client.post("/api/parcels/search", json=EMEK_QUERY)
        assert resp.status_code == 200
        assert resp.json()["data"]["userId"] is None


class TestParcelLookup:
    def _create(self, client: TestClient) -> str:
        resp = client.post("/api/parcels/search", json=EMEK_QUERY, headers=auth_headers())
        return resp.json()["data"]["id"]

    def test_get_parcel(self, client: TestClient) -> None:
        parcel_id = self._create(client)
        resp = client.get(f"/api/parcels/{parcel_id}", headers=auth_headers())
        assert resp.status_code == 200
        assert resp.json()["data"]["mahalle"] == "Emek"

    def test_get_requires_auth(self, client: TestClient) -> None:
        parcel_id = self._create(client)
        assert client.get(f"/api/parcels/{parcel_id}").status_code == 401

    def test_get_missing(self, client: TestClient) -> None:
        resp = client.get("/api/parcels/missing", headers=auth_headers())
        assert resp.status_code == 404

    def test_add_note(self, client: TestClient) -> None:
        parcel_id = self._create(client)
        resp = client.post(
            f"/api/parcels/{parcel_id}/notes",
            json={"note": "Boundary wall is cracked"},
            headers=auth_headers(),
        )
        assert resp.status_code == 200
        notes = resp.json()["data"]["notes"]
        assert len(notes) == 1
        assert notes[0]["content"] == "Boundary wall is cracked"
        assert notes[0]["userId"] == AYSE_USER_ID
        assert notes[0]["createdAt"]

    def test_add_blank_note(self, client: TestClient) -> None:
        parcel_id = self._create(client)
        resp = client.post(
            f"/api/parcels/{parcel_id}/notes", json={"note": " "}, headers=auth_headers()
        )
        assert resp.status_code == 400

    def test_add_note_missing_parcel(self, client: TestClient) -> None:
        resp = client.post(
            "/api/parcels/missing/notes", json={"note": "x"}, headers=auth_headers()
        )
        assert resp.status_code == 404
