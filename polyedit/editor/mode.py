from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
from ..core.polygon import Point


@dataclass(frozen=True)
class SelectMode:
    """Clicking picks polygons."""


@dataclass(frozen=True)
class DrawMode:
    """
    Clicking appends points to the draft path.

    When `replacing_id` is set, closing the draft replaces the points of
    that polygon instead of creating a new one. `original_points` keeps
    the geometry it had before the redraw started, so it can be put
    back if the redraw is abandoned.
    """

    replacing_id: Optional[str] = None
    original_points: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class EditMode:
    """The control points of `target_id` can be dragged."""

    target_id: str


EditorMode = Union[SelectMode, DrawMode, EditMode]


@dataclass(frozen=True)
class DragState:
    polygon_id: str
    point_index: int


@dataclass(frozen=True)
class PanState:
    last_screen_point: Point


def mode_hints(mode: EditorMode) -> List[str]:
    """Returns the short usage instructions shown for a mode."""
    if isinstance(mode, DrawMode):
        return [
            _("Click to add points"),
            _("Click near first point to close"),
            _("Press Escape to cancel"),
        ]
    if isinstance(mode, EditMode):
        return [
            _("Drag control points to edit"),
            _("Click outside to finish editing"),
            _("Press Escape to cancel"),
        ]
    return [
        _("Click polygons to select them"),
        _("Use the toolbar to manage polygons"),
        _("Scroll to zoom, Ctrl+drag to pan"),
    ]
