from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable, NamedTuple, Tuple


class Point(NamedTuple):
    """A position in world space."""

    x: float
    y: float


def as_points(points: Iterable[Tuple[float, float]]) -> Tuple[Point, ...]:
    """Normalizes any iterable of (x, y) pairs into a tuple of Points."""
    return tuple(Point(float(p[0]), float(p[1])) for p in points)


@dataclass(frozen=True)
class Polygon:
    """
    A closed shape authored on the canvas.

    The order of `points` defines the edges and the winding. A polygon
    with fewer than three points is incomplete: it is still drawn as an
    open path but never takes part in hit-testing or filling.
    """

    id: str
    points: Tuple[Point, ...]
    color: str

    MIN_POINTS = 3

    @property
    def is_complete(self) -> bool:
        return len(self.points) >= self.MIN_POINTS

    def __len__(self) -> int:
        return len(self.points)

    def with_points(self, points: Iterable[Tuple[float, float]]) -> Polygon:
        return replace(self, points=as_points(points))

    def with_point_at(self, index: int, point: Tuple[float, float]) -> Polygon:
        points = list(self.points)
        points[index] = Point(float(point[0]), float(point[1]))
        return replace(self, points=tuple(points))
