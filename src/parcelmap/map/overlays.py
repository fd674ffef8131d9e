"""Overlay arena keyed by stable identity, reconciled against desired state.

:func:`reconcile` is pure: it compares the overlays currently on the map
with the overlays the application state calls for and returns the
add/update/remove diff. :class:`OverlayRegistry` commits each diff to the
map surface in a single batch, so a render pass never exposes a partial
overlay set, and re-deriving the same state twice is a no-op.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict

from parcelmap.core.types import OverlayKind
from parcelmap.geo.models import GeoPoint, Polygon
from parcelmap.notes.models import Note


class OverlayKey(NamedTuple):
    kind: OverlayKind
    ident: str


PARCEL_BOUNDARY_KEY = OverlayKey(OverlayKind.PARCEL_BOUNDARY, "parcel")


class OverlayStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    fill_color: str
    fill_opacity: float
    stroke_color: str
    stroke_opacity: float = 1.0
    stroke_weight: int = 2


PARCEL_STYLE = OverlayStyle(fill_color="#FF0000", fill_opacity=0.35, stroke_color="#FF0000")
USER_POLYGON_STYLE = OverlayStyle(fill_color="#1976D2", fill_opacity=0.25, stroke_color="#1976D2")


class Overlay(BaseModel):
    """A rendered shape: a closed vertex ring or a single marker position."""

    model_config = ConfigDict(frozen=True)

    kind: OverlayKind
    ident: str
    vertices: tuple[GeoPoint, ...] = ()
    position: GeoPoint | None = None
    label: str = ""
    style: OverlayStyle | None = None

    @property
    def key(self) -> OverlayKey:
        return OverlayKey(self.kind, self.ident)

    @classmethod
    def parcel_boundary(cls, ring: Polygon) -> Overlay:
        return cls(
            kind=OverlayKind.PARCEL_BOUNDARY,
            ident=PARCEL_BOUNDARY_KEY.ident,
            vertices=tuple(ring.closed_ring()),
            style=PARCEL_STYLE,
        )

    @classmethod
    def user_polygon(cls, index: int, ring: Polygon) -> Overlay:
        return cls(
            kind=OverlayKind.USER_POLYGON,
            ident=str(index),
            vertices=tuple(ring.closed_ring()),
            style=USER_POLYGON_STYLE,
        )

    @classmethod
    def note_marker(cls, note: Note) -> Overlay:
        return cls(
            kind=OverlayKind.NOTE_MARKER,
            ident=note.id,
            position=note.position,
            label=note.content,
        )


class OverlayDiff(BaseModel):
    added: list[Overlay] = []
    updated: list[Overlay] = []
    removed: list[OverlayKey] = []

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.removed)


def reconcile(current: Mapping[OverlayKey, Overlay], desired: Iterable[Overlay]) -> OverlayDiff:
    """Compute the diff that turns ``current`` into ``desired``.

    Raises:
        ValueError: If ``desired`` holds two overlays with the same key.
    """
    wanted: dict[OverlayKey, Overlay] = {}
    for overlay in desired:
        if overlay.key in wanted:
            raise ValueError(f"Duplicate overlay key {overlay.key!r}")
        wanted[overlay.key] = overlay

    diff = OverlayDiff()
    for key, overlay in wanted.items():
        existing = current.get(key)
        if existing is None:
            diff.added.append(overlay)
        elif existing != overlay:
            diff.updated.append(overlay)
    diff.removed.extend(key for key in current if key not in wanted)
    return diff


class OverlayRegistry:
    """Tracks live overlays and the surface handles that back them.

    Owned by exactly one map view. :meth:`release` detaches everything
    and makes the registry unusable.
    """

    def __init__(self, surface: Any) -> None:
        self._surface = surface
        self._overlays: dict[OverlayKey, Overlay] = {}
        self._handles: dict[OverlayKey, Any] = {}
        self._released = False

    @property
    def overlays(self) -> dict[OverlayKey, Overlay]:
        return dict(self._overlays)

    @property
    def handles(self) -> dict[OverlayKey, Any]:
        return dict(self._handles)

    @property
    def released(self) -> bool:
        return self._released

    def __len__(self) -> int:
        return len(self._overlays)

    def __contains__(self, key: object) -> bool:
        return key in self._overlays

    def sync(self, desired: Iterable[Overlay]) -> OverlayDiff:
        """Make the map show exactly ``desired``."""
        if self._released:
            raise RuntimeError("Overlay registry has been released")
        return self._commit(reconcile(self._overlays, desired))

    def release(self) -> OverlayDiff:
        """Detach every overlay. Safe to call more than once."""
        if self._released:
            return OverlayDiff()
        diff = self._commit(reconcile(self._overlays, ()))
        self._released = True
        return diff

    def _commit(self, diff: OverlayDiff) -> OverlayDiff:
        if diff.is_empty:
            return diff
        new_handles = self._surface.commit(diff)
        for key in diff.removed:
            self._overlays.pop(key, None)
            self._handles.pop(key, None)
        for overlay in diff.updated:
            self._overlays[overlay.key] = overlay
        for overlay in diff.added:
            self._overlays[overlay.key] = overlay
            self._handles[overlay.key] = new_handles.get(overlay.key)
        return diff
