"""Map surface contract and an in-memory implementation.

The real rendering engine (tiles, vector drawing, pointer capture) is an
external collaborator. This module pins down the little the annotation
subsystem needs from it.
"""

from __future__ import annotations

import itertools
from typing import Any, Protocol, runtime_checkable

from parcelmap.geo.models import BoundingBox, GeoPoint
from parcelmap.map.overlays import Overlay, OverlayDiff, OverlayKey


@runtime_checkable
class MapSurface(Protocol):
    """Protocol for the map rendering collaborator."""

    def render_base_map(self, center: GeoPoint, zoom: int) -> None: ...

    def commit(self, diff: OverlayDiff) -> dict[OverlayKey, Any]:
        """Apply ``diff`` in one render pass. Returns handles for added overlays."""
        ...

    def pan_to(self, center: GeoPoint, zoom: int | None = None) -> None: ...

    def fit_bounds(self, bounds: BoundingBox) -> None: ...


class InMemoryMapSurface:
    """Headless surface that records what would be on screen.

    Rejects diffs that would duplicate or orphan an overlay, so any
    registry bug shows up as an error instead of a silent leak.
    """

    def __init__(self) -> None:
        self.rendered: dict[OverlayKey, Overlay] = {}
        self.commits: list[OverlayDiff] = []
        self.center: GeoPoint | None = None
        self.zoom: int | None = None
        self.bounds: BoundingBox | None = None
        self.base_rendered = False
        self._ids = itertools.count(1)

    def render_base_map(self, center: GeoPoint, zoom: int) -> None:
        self.base_rendered = True
        self.center = center
        self.zoom = zoom

    def commit(self, diff: OverlayDiff) -> dict[OverlayKey, Any]:
        staged = dict(self.rendered)
        for key in diff.removed:
            if key not in staged:
                raise RuntimeError(f"Cannot remove unknown overlay {key!r}")
            del staged[key]
        for overlay in diff.updated:
            if overlay.key not in staged:
                raise RuntimeError(f"Cannot update unknown overlay {overlay.key!r}")
            staged[overlay.key] = overlay
        handles: dict[OverlayKey, Any] = {}
        for overlay in diff.added:
            if overlay.key in staged:
                raise RuntimeError(f"Overlay {overlay.key!r} is already rendered")
            staged[overlay.key] = overlay
            handles[overlay.key] = next(self._ids)
        self.rendered = staged
        self.commits.append(diff)
        return handles

    def pan_to(self, center: GeoPoint, zoom: int | None = None) -> None:
        self.center = center
        if zoom is not None:
            self.zoom = zoom

    def fit_bounds(self, bounds: BoundingBox) -> None:
        self.bounds = bounds
        self.center = bounds.center
