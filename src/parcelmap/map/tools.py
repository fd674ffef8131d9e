"""Tool-mode state machine routing raw map events to mode-specific handlers.

The machine owns the active :class:`ToolMode` and the working polygon. It
has no rendering dependencies: every event goes through
:meth:`ToolStateMachine.dispatch` and comes back as a plain outcome value
that the hosting view turns into overlay and note changes.
"""

from __future__ import annotations

import logging
from typing import Annotated, Callable, Literal, Union

from pydantic import BaseModel, Field

from parcelmap.core.types import ToolMode
from parcelmap.geo.models import GeoPoint, Polygon
from parcelmap.map.builder import PolygonBuilder
from parcelmap.notes.models import LocationInfo

logger = logging.getLogger(__name__)


# --- Events ---


class MapClick(BaseModel):
    kind: Literal["click"] = "click"
    position: GeoPoint


class MapHover(BaseModel):
    kind: Literal["hover"] = "hover"
    position: GeoPoint | None = None


class SelectTool(BaseModel):
    kind: Literal["select_tool"] = "select_tool"
    mode: ToolMode


class OpenTextEntry(BaseModel):
    """Explicit action that enters ``input`` mode. Map clicks never do."""

    kind: Literal["open_text_entry"] = "open_text_entry"


class CompletePolygon(BaseModel):
    kind: Literal["complete_polygon"] = "complete_polygon"


class CancelPolygon(BaseModel):
    kind: Literal["cancel_polygon"] = "cancel_polygon"


MapEvent = Annotated[
    Union[MapClick, MapHover, SelectTool, OpenTextEntry, CompletePolygon, CancelPolygon],
    Field(discriminator="kind"),
]


# --- Outcomes ---


class ToolChanged(BaseModel):
    kind: Literal["tool_changed"] = "tool_changed"
    previous: ToolMode
    current: ToolMode
    discarded_vertices: int = 0


class NotePrompt(BaseModel):
    """Request to open the note-creation prompt pre-filled with a position."""

    kind: Literal["note_prompt"] = "note_prompt"
    position: GeoPoint
    source: Literal["marker", "polygon"]
    location_info: LocationInfo | None = None
    polygon_index: int | None = None


class VertexAdded(BaseModel):
    kind: Literal["vertex_added"] = "vertex_added"
    position: GeoPoint
    vertex_count: int


class CoordinatePicked(BaseModel):
    """A picked position for the copy-to-clipboard readout. Opens no dialog."""

    kind: Literal["coordinate_picked"] = "coordinate_picked"
    position: GeoPoint

    @property
    def clipboard_text(self) -> str:
        return f"{self.position.lat:.6f}, {self.position.lng:.6f}"


class PolygonCompleted(BaseModel):
    kind: Literal["polygon_completed"] = "polygon_completed"
    polygon: Polygon
    prompt: NotePrompt


class PolygonRejected(BaseModel):
    kind: Literal["polygon_rejected"] = "polygon_rejected"
    vertex_count: int
    required: int


class PolygonCancelled(BaseModel):
    kind: Literal["polygon_cancelled"] = "polygon_cancelled"
    discarded_vertices: int


ToolOutcome = Union[
    ToolChanged,
    NotePrompt,
    VertexAdded,
    CoordinatePicked,
    PolygonCompleted,
    PolygonRejected,
    PolygonCancelled,
]


class ToolStateMachine:
    """Owns the active tool mode and routes events by mode.

    Selecting a tool replaces the current mode unconditionally. Leaving
    ``polygon`` mode discards the working ring without warning.
    """

    def __init__(
        self,
        builder: PolygonBuilder | None = None,
        on_pan_click: Callable[[GeoPoint], None] | None = None,
    ) -> None:
        self._builder = builder or PolygonBuilder()
        self._on_pan_click = on_pan_click
        self._mode = ToolMode.PAN
        self._picked: GeoPoint | None = None
        self._hover: GeoPoint | None = None

    @property
    def mode(self) -> ToolMode:
        return self._mode

    @property
    def builder(self) -> PolygonBuilder:
        return self._builder

    @property
    def picked_coordinate(self) -> GeoPoint | None:
        return self._picked

    @property
    def hover_position(self) -> GeoPoint | None:
        return self._hover

    def dispatch(self, event: MapEvent) -> ToolOutcome | None:
        """Route ``event`` to its handler and return what the view should do."""
        if isinstance(event, MapClick):
            return self.handle_click(event.position)
        if isinstance(event, MapHover):
            self._hover = event.position
            return None
        if isinstance(event, SelectTool):
            return self.select(event.mode)
        if isinstance(event, OpenTextEntry):
            return self.select(ToolMode.INPUT)
        if isinstance(event, CompletePolygon):
            return self.complete_polygon()
        if isinstance(event, CancelPolygon):
            return PolygonCancelled(discarded_vertices=self._builder.cancel())
        raise TypeError(f"Unsupported map event: {event!r}")

    def select(self, mode: ToolMode) -> ToolChanged:
        previous = self._mode
        discarded = 0
        if previous == ToolMode.POLYGON and mode != ToolMode.POLYGON:
            discarded = self._builder.cancel()
            if discarded:
                logger.debug("Discarded %d pending polygon vertices", discarded)
        self._mode = mode
        return ToolChanged(previous=previous, current=mode, discarded_vertices=discarded)

    def handle_click(self, position: GeoPoint) -> ToolOutcome | None:
        mode = self._mode
        if mode == ToolMode.PAN:
            if self._on_pan_click is not None:
                self._on_pan_click(position)
            return None
        if mode == ToolMode.MARKER:
            return NotePrompt(position=position, source="marker")
        if mode == ToolMode.POLYGON:
            count = self._builder.add_vertex(position)
            return VertexAdded(position=position, vertex_count=count)
        if mode == ToolMode.COORDINATE:
            self._picked = position
            return CoordinatePicked(position=position)
        # input mode ignores map clicks
        return None

    def complete_polygon(self) -> PolygonCompleted | PolygonRejected:
        pending = len(self._builder.vertices)
        completed = self._builder.complete()
        if completed is None:
            return PolygonRejected(
                vertex_count=pending, required=self._builder.min_vertices
            )
        return PolygonCompleted(
            polygon=completed.polygon,
            prompt=NotePrompt(position=completed.centroid, source="polygon"),
        )
