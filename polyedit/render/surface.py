from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Tuple
from ..core.palette import ColorRGBA


class Surface(ABC):
    """
    The minimal set of drawing primitives the renderer needs. All
    coordinates are in screen pixels.

    Like cairo, a surface has a current path: `path` and `circle` replace
    it, `fill` and `stroke` consume it.
    """

    @abstractmethod
    def clear(self, color: ColorRGBA):
        """Paints the whole surface with a single color."""
        pass

    @abstractmethod
    def path(self, points: Sequence[Tuple[float, float]], close: bool):
        pass

    @abstractmethod
    def circle(self, center: Tuple[float, float], radius: float):
        pass

    @abstractmethod
    def fill(self, color: ColorRGBA, preserve: bool = False):
        """
        Fills the current path. With `preserve` the path survives, so it
        can be stroked afterwards.
        """
        pass

    @abstractmethod
    def stroke(self, color: ColorRGBA, width: float):
        pass


class RecordingSurface(Surface):
    """
    A surface that only remembers what it was asked to draw. Useful for
    inspecting the output of a render without a graphics backend.
    """

    def __init__(self):
        self.commands: List[Tuple[Any, ...]] = []

    def clear(self, color: ColorRGBA):
        self.commands.append(("clear", color))

    def path(self, points: Sequence[Tuple[float, float]], close: bool):
        self.commands.append(("path", tuple(points), close))

    def circle(self, center: Tuple[float, float], radius: float):
        self.commands.append(("circle", tuple(center), radius))

    def fill(self, color: ColorRGBA, preserve: bool = False):
        self.commands.append(("fill", color, preserve))

    def stroke(self, color: ColorRGBA, width: float):
        self.commands.append(("stroke", color, width))

    def of_kind(self, kind: str) -> List[Tuple[Any, ...]]:
        return [c for c in self.commands if c[0] == kind]
