"""
Everything the editor reacts to: raw pointer and keyboard input coming
from the drawing surface, and commands issued by the surrounding UI.

Screen coordinates are in pixels relative to the drawing surface.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Union


class MouseButton(IntEnum):
    PRIMARY = 1
    MIDDLE = 2
    SECONDARY = 3


@dataclass(frozen=True)
class PrimaryClick:
    x: float
    y: float


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float
    button: int = MouseButton.PRIMARY
    pan_modifier: bool = False


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class Wheel:
    """
    A single wheel notch. A positive `delta_sign` scrolls down and zooms
    out, a negative one zooms in, zero is ignored.
    """

    x: float
    y: float
    delta_sign: int


@dataclass(frozen=True)
class KeyEscape:
    pass


@dataclass(frozen=True)
class StartDraw:
    pass


@dataclass(frozen=True)
class StartReplaceDraw:
    polygon_id: str


@dataclass(frozen=True)
class SelectPolygon:
    polygon_id: str


@dataclass(frozen=True)
class EditPoints:
    polygon_id: str


@dataclass(frozen=True)
class DeletePolygon:
    polygon_id: str


@dataclass(frozen=True)
class ZoomIn:
    anchor: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class ZoomOut:
    anchor: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class ResetView:
    pass


InputEvent = Union[
    PrimaryClick, PointerDown, PointerMove, PointerUp, Wheel, KeyEscape
]
Command = Union[
    StartDraw,
    StartReplaceDraw,
    SelectPolygon,
    EditPoints,
    DeletePolygon,
    ZoomIn,
    ZoomOut,
    ResetView,
]
Event = Union[InputEvent, Command]
