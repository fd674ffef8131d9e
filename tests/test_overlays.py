"""Tests for overlay reconciliation and the overlay registry."""

from __future__ import annotations

import pytest

from parcelmap.core.types import OverlayKind
from parcelmap.geo.models import GeoPoint, Polygon
from parcelmap.map.overlays import (
    PARCEL_BOUNDARY_KEY,
    PARCEL_STYLE,
    Overlay,
    OverlayDiff,
    OverlayKey,
    OverlayRegistry,
    reconcile,
)
from parcelmap.map.surface import InMemoryMapSurface
from parcelmap.notes.models import Note


def _ring(offset: float = 0.0) -> Polygon:
    return Polygon(
        vertices=(
            GeoPoint(lat=offset, lng=0),
            GeoPoint(lat=offset, lng=1),
            GeoPoint(lat=offset + 1, lng=1),
        )
    )


def _note(content: str = "Gate", note_id: str = "n1") -> Note:
    return Note(id=note_id, content=content, position=GeoPoint(lat=39.92, lng=32.85))


class TestOverlayFactories:
    def test_parcel_boundary_is_closed_and_styled(self):
        overlay = Overlay.parcel_boundary(_ring())
        assert overlay.key == PARCEL_BOUNDARY_KEY
        assert overlay.vertices[0] == overlay.vertices[-1]
        assert overlay.style == PARCEL_STYLE
        assert overlay.style.fill_color == "#FF0000"
        assert overlay.style.fill_opacity == 0.35

    def test_note_marker_keyed_by_note_id(self):
        overlay = Overlay.note_marker(_note())
        assert overlay.key == OverlayKey(OverlayKind.NOTE_MARKER, "n1")
        assert overlay.label == "Gate"


class TestReconcile:
    def test_adds_updates_removes(self):
        old_marker = Overlay.note_marker(_note("Gate"))
        current = {
            old_marker.key: old_marker,
            OverlayKey(OverlayKind.USER_POLYGON, "0"): Overlay.user_polygon(0, _ring()),
        }
        desired = [
            Overlay.note_marker(_note("Gate, repaired")),
            Overlay.parcel_boundary(_ring(5)),
        ]
        diff = reconcile(current, desired)
        assert [o.key for o in diff.added] == [PARCEL_BOUNDARY_KEY]
        assert [o.label for o in diff.updated] == ["Gate, repaired"]
        assert diff.removed == [OverlayKey(OverlayKind.USER_POLYGON, "0")]

    def test_same_state_is_empty_diff(self):
        overlays = [Overlay.parcel_boundary(_ring()), Overlay.note_marker(_note())]
        current = {o.key: o for o in overlays}
        assert reconcile(current, overlays).is_empty

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            reconcile({}, [Overlay.parcel_boundary(_ring()), Overlay.parcel_boundary(_ring(2))])


class TestOverlayRegistry:
    def test_sync_commits_once_per_pass(self):
        surface = InMemoryMapSurface()
        registry = OverlayRegistry(surface)
        registry.sync([Overlay.parcel_boundary(_ring()), Overlay.note_marker(_note())])
        assert len(surface.commits) == 1
        assert set(surface.rendered) == set(registry.overlays)
        assert len(registry.handles) == 2

    def test_rederiving_same_state_is_noop(self):
        surface = InMemoryMapSurface()
        registry = OverlayRegistry(surface)
        desired = [Overlay.parcel_boundary(_ring())]
        registry.sync(desired)
        diff = registry.sync(desired)
        assert diff.is_empty
        assert len(surface.commits) == 1

    def test_at_most_one_parcel_boundary(self):
        surface = InMemoryMapSurface()
        registry = OverlayRegistry(surface)
        marker = Overlay.note_marker(_note(note_id="a"))
        registry.sync([marker, Overlay.parcel_boundary(_ring())])
        diff = registry.sync([marker, Overlay.parcel_boundary(_ring(3))])
        assert [o.key for o in diff.updated] == [PARCEL_BOUNDARY_KEY]
        assert diff.added == [] and diff.removed == []
        boundaries = [k for k in surface.rendered if k.kind == OverlayKind.PARCEL_BOUNDARY]
        assert boundaries == [PARCEL_BOUNDARY_KEY]
        assert surface.rendered[PARCEL_BOUNDARY_KEY].vertices[0].lat == 3

    def test_remove_detaches_exactly_one(self):
        surface = InMemoryMapSurface()
        registry = OverlayRegistry(surface)
        a = Overlay.note_marker(_note(note_id="a"))
        b = Overlay.note_marker(_note(note_id="b"))
        registry.sync([a, b])
        diff = registry.sync([b])
        assert diff.removed == [a.key]
        assert a.key not in registry
        assert b.key in registry
        assert list(surface.rendered) == [b.key]

    def test_release_detaches_everything(self):
        surface = InMemoryMapSurface()
        registry = OverlayRegistry(surface)
        registry.sync([Overlay.parcel_boundary(_ring()), Overlay.user_polygon(0, _ring())])
        registry.release()
        assert surface.rendered == {}
        assert len(registry) == 0
        assert registry.released
        assert registry.release().is_empty
        with pytest.raises(RuntimeError):
            registry.sync([])


class TestInMemoryMapSurface:
    def test_rejects_orphan_removal(self):
        surface = InMemoryMapSurface()
        with pytest.raises(RuntimeError):
            surface.commit(OverlayDiff(removed=[PARCEL_BOUNDARY_KEY]))
        assert surface.rendered == {}
