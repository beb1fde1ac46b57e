"""
Geometric predicates used to decide what the pointer is on.

All functions work in world coordinates and are free of side effects.
"""
import math
from typing import Iterable, Optional, Sequence, Tuple
from .polygon import Polygon


def distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def point_in_polygon(
    point: Tuple[float, float], polygon: Polygon
) -> bool:
    """
    Even-odd ray casting test. A horizontal ray is cast from `point`
    towards +x and every edge it crosses toggles the result.

    Incomplete polygons (fewer than three points) never contain anything.
    """
    if not polygon.is_complete:
        return False
    return _ray_cast(point, polygon.points)


def _ray_cast(
    point: Tuple[float, float], vertices: Sequence[Tuple[float, float]]
) -> bool:
    x, y = point
    inside = False
    j = len(vertices) - 1
    for i in range(len(vertices)):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        j = i
        # Horizontal edges never cross a horizontal ray.
        if yi == yj:
            continue
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
    return inside


def nearest_control_point(
    point: Tuple[float, float], polygon: Polygon, radius: float
) -> Optional[int]:
    """
    Returns the index of the first vertex closer than `radius` to
    `point`, or None. The radius is in world units; callers derive it
    from a fixed pixel radius divided by the current scale.
    """
    for index, vertex in enumerate(polygon.points):
        if distance(point, vertex) < radius:
            return index
    return None


def find_polygon_at(
    point: Tuple[float, float], polygons: Iterable[Polygon]
) -> Optional[Polygon]:
    """
    Returns the first complete polygon containing `point`. When shapes
    overlap, the one that comes first in the given order wins.
    """
    for polygon in polygons:
        if point_in_polygon(point, polygon):
            return polygon
    return None
