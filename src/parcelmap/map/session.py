"""Map view session: the scoped owner of tool state, overlays and requests.

A :class:`MapSession` is acquired when the map view mounts and released
when it unmounts. It exclusively owns the overlay registry, the working
polygon and every in-flight request; :meth:`MapSession.close` cancels the
requests and detaches all overlays.

Usage::

    async with MapSession(api, surface) as session:
        session.on_map_event(SelectTool(mode=ToolMode.MARKER))
        prompt = session.on_map_event(MapClick(position=point))
        await session.create_note("Fence needs repair", prompt.position)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

from parcelmap.client.api import ParcelMapApi
from parcelmap.core.config import MapConfig
from parcelmap.core.errors import ParcelMapError
from parcelmap.core.types import ToolMode
from parcelmap.geo.models import GeoPoint, Polygon
from parcelmap.geo.parser import CoordinateInputParser
from parcelmap.map.builder import PolygonBuilder
from parcelmap.map.notes import NoteStore
from parcelmap.map.overlays import Overlay, OverlayDiff, OverlayKey, OverlayRegistry
from parcelmap.map.surface import MapSurface
from parcelmap.map.tools import (
    MapEvent,
    NotePrompt,
    PolygonCompleted,
    ToolOutcome,
    ToolStateMachine,
)
from parcelmap.notes.models import LocationInfo, Note
from parcelmap.parcels.models import Parcel, ParcelQuery

logger = logging.getLogger(__name__)


class MapSession:
    """Routes map events and keeps overlays consistent with application state.

    Args:
        api: Backend for notes and parcels.
        surface: Map rendering collaborator.
        config: Map defaults (initial view, focus zoom, minimum vertices).
        on_pan_click: Optional callback for clicks in ``pan`` mode.
        on_error: Optional callback for failures of background requests,
            used to surface a transient alert.
    """

    def __init__(
        self,
        api: ParcelMapApi,
        surface: MapSurface,
        config: MapConfig | None = None,
        on_pan_click: Callable[[GeoPoint], None] | None = None,
        on_error: Callable[[ParcelMapError], None] | None = None,
    ) -> None:
        self._config = config or MapConfig()
        self._api = api
        self._surface = surface
        self._on_error = on_error
        self._tools = ToolStateMachine(
            builder=PolygonBuilder(min_vertices=self._config.min_polygon_vertices),
            on_pan_click=on_pan_click,
        )
        self._parser = CoordinateInputParser(min_vertices=self._config.min_polygon_vertices)
        self._registry = OverlayRegistry(surface)
        self._notes = NoteStore(api)
        self._polygons: list[Polygon] = []
        self._parcel: Parcel | None = None
        self._search_seq = 0
        self._search_task: asyncio.Task[Parcel] | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._opened = False
        self._closed = False
        self.last_error: ParcelMapError | None = None

    # -- lifecycle -----------------------------------------------------------

    async def __aenter__(self) -> MapSession:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def open(self, load_notes: bool = True) -> None:
        """Render the base map and start loading the note list."""
        self._ensure_open(allow_unopened=True)
        center = GeoPoint(
            lat=self._config.default_center_lat, lng=self._config.default_center_lng
        )
        self._surface.render_base_map(center, self._config.default_zoom)
        self._opened = True
        if load_notes:
            self._spawn(self.reload_notes())

    async def close(self) -> None:
        """Cancel in-flight requests and detach every overlay."""
        if self._closed:
            return
        self._closed = True
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tools.builder.cancel()
        self._registry.release()

    @property
    def closed(self) -> bool:
        return self._closed

    # -- state ---------------------------------------------------------------

    @property
    def mode(self) -> ToolMode:
        return self._tools.mode

    @property
    def parcel(self) -> Parcel | None:
        return self._parcel

    @property
    def polygons(self) -> list[Polygon]:
        return list(self._polygons)

    @property
    def notes(self) -> list[Note]:
        return self._notes.notes

    @property
    def working_vertices(self) -> tuple[GeoPoint, ...]:
        return self._tools.builder.vertices

    @property
    def picked_coordinate(self) -> GeoPoint | None:
        return self._tools.picked_coordinate

    @property
    def hover_position(self) -> GeoPoint | None:
        return self._tools.hover_position

    @property
    def overlays(self) -> dict[OverlayKey, Overlay]:
        return self._registry.overlays

    # -- events --------------------------------------------------------------

    def on_map_event(self, event: MapEvent) -> ToolOutcome | None:
        """Single entry point for pointer events and tool actions."""
        self._ensure_open()
        outcome = self._tools.dispatch(event)

        if isinstance(outcome, NotePrompt):
            return outcome.model_copy(update={"location_info": self._location_info()})

        if isinstance(outcome, PolygonCompleted):
            self._polygons.append(outcome.polygon)
            prompt = outcome.prompt.model_copy(
                update={
                    "location_info": self._location_info(),
                    "polygon_index": len(self._polygons) - 1,
                }
            )
            self.render()
            return outcome.model_copy(update={"prompt": prompt})

        return outcome

    def submit_coordinates(self, text: str) -> Polygon:
        """Add a polygon typed as ``[[lng, lat], ...]`` and frame the view on it.

        Raises:
            MalformedCoordinateInput: The text is not a usable ring; no
                overlay or view state is changed.
        """
        self._ensure_open()
        polygon = self._parser.parse(text)
        self._polygons.append(polygon)
        self.render()
        self._surface.fit_bounds(polygon.bounding_box())
        return polygon

    def render(self) -> OverlayDiff:
        """Re-derive overlays from state and commit the difference in one pass."""
        return self._registry.sync(self._desired_overlays())

    # -- parcels -------------------------------------------------------------

    async def search_parcel(self, query: ParcelQuery) -> Parcel | None:
        """Search for a parcel; only the most recently issued search is applied.

        Issuing a search cancels the one still in flight. Returns None when
        this search was superseded, in which case nothing was changed.
        """
        self._ensure_open()
        self._search_seq += 1
        seq = self._search_seq
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()

        task = self._spawn_raw(self._api.search_parcel(query))
        self._search_task = task
        try:
            parcel = await task
        except asyncio.CancelledError:
            if task.cancelled() and (seq != self._search_seq or self._closed):
                logger.debug("Parcel search %d superseded before completion", seq)
                return None
            raise
        except ParcelMapError:
            if seq != self._search_seq:
                return None
            raise

        if seq != self._search_seq or self._closed:
            logger.warning("Discarding stale parcel search result %d", seq)
            return None

        self._parcel = parcel
        self.render()
        self._surface.pan_to(parcel.center, self._config.focus_zoom)
        return parcel

    async def add_parcel_note(self, text: str) -> Parcel:
        """Append a free-text note to the currently shown parcel."""
        self._ensure_open()
        if self._parcel is None:
            raise ValueError("No parcel is loaded")
        parcel = await self._api.add_parcel_note(self._parcel.id, text)
        if self._parcel is not None and self._parcel.id == parcel.id:
            self._parcel = parcel
        return parcel

    # -- notes ---------------------------------------------------------------

    async def reload_notes(self) -> list[Note]:
        self._ensure_open()
        notes = await self._notes.load()
        self.render()
        return notes

    async def create_note(
        self,
        content: str,
        position: GeoPoint,
        location_info: LocationInfo | None = None,
    ) -> Note:
        self._ensure_open()
        if location_info is None:
            location_info = self._location_info()
        note = await self._notes.create(content, position, location_info)
        self.render()
        return note

    async def update_note(
        self, note_id: str, content: str, position: GeoPoint | None = None
    ) -> Note:
        self._ensure_open()
        note = await self._notes.update(note_id, content, position)
        self.render()
        return note

    async def delete_note(self, note_id: str) -> None:
        self._ensure_open()
        await self._notes.delete(note_id)
        self.render()

    # -- internal ------------------------------------------------------------

    def _desired_overlays(self) -> list[Overlay]:
        overlays: list[Overlay] = []
        if self._parcel is not None:
            overlays.append(Overlay.parcel_boundary(self._parcel.geometry.exterior))
        overlays.extend(Overlay.user_polygon(i, p) for i, p in enumerate(self._polygons))
        overlays.extend(Overlay.note_marker(n) for n in self._notes.notes)
        return overlays

    def _location_info(self) -> LocationInfo | None:
        return self._parcel.location_info if self._parcel is not None else None

    def _ensure_open(self, allow_unopened: bool = False) -> None:
        if self._closed:
            raise RuntimeError("Map session is closed")
        if not self._opened and not allow_unopened:
            raise RuntimeError("Map session is not open")

    def _spawn_raw(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Run ``coro`` in the background, reporting failures through on_error."""

        async def guarded() -> Any:
            try:
                return await coro
            except ParcelMapError as exc:
                self._report(exc)
                return None

        return self._spawn_raw(guarded())

    def _report(self, exc: ParcelMapError) -> None:
        self.last_error = exc
        logger.warning("Map request failed: %s", exc)
        if self._on_error is not None:
            self._on_error(exc)

    async def wait_idle(self) -> None:
        """Wait until every background request has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
