"""Map view interaction: tool modes, polygon drawing and overlay reconciliation.

The map rendering engine itself is external; :class:`MapSurface` describes
what this package needs from it.
"""

from parcelmap.map.builder import PolygonBuilder
from parcelmap.map.overlays import Overlay, OverlayRegistry, reconcile
from parcelmap.map.session import MapSession
from parcelmap.map.surface import InMemoryMapSurface, MapSurface
from parcelmap.map.tools import ToolStateMachine

__all__ = [
    "InMemoryMapSurface",
    "MapSession",
    "MapSurface",
    "Overlay",
    "OverlayRegistry",
    "PolygonBuilder",
    "ToolStateMachine",
    "reconcile",
]
