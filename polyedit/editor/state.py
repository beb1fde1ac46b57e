from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple
from ..core.polygon import Point, Polygon
from ..core.store import PolygonStore
from ..core.viewport import ViewportState
from .mode import DragState, EditorMode, PanState, SelectMode


@dataclass(frozen=True)
class EditorState:
    """
    A complete, immutable snapshot of the editor.

    This is what renderers receive. A new instance is produced for
    every event that changes anything; unchanged events hand back the
    very same object.
    """

    store: PolygonStore = field(default_factory=PolygonStore)
    mode: EditorMode = field(default_factory=SelectMode)
    draft_path: Tuple[Point, ...] = ()
    viewport: ViewportState = field(default_factory=ViewportState)
    drag: Optional[DragState] = None
    pan: Optional[PanState] = None
    # Set when a pointer-down started a pan or drag, so that the click
    # the platform reports on release is not interpreted as well.
    suppress_click: bool = False

    @property
    def polygons(self) -> Tuple[Polygon, ...]:
        return self.store.all()

    @property
    def selected_id(self) -> Optional[str]:
        return self.store.selected_id

    @property
    def drag_index(self) -> Optional[int]:
        return self.drag.point_index if self.drag else None

    @property
    def is_panning(self) -> bool:
        return self.pan is not None

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None
