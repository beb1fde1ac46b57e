from __future__ import annotations
import logging
import dataclasses
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple
from .polygon import Point, Polygon, as_points


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolygonStore:
    """
    The ordered collection of polygons plus the current selection.

    The store is an immutable value: every mutating operation returns a
    new store and leaves the receiver untouched. Invalid references
    never raise, they leave the store unchanged.

    Ids are generated from a counter that only ever increases, so an id
    is never handed out twice, even after the polygon was deleted.
    """

    polygons: Tuple[Polygon, ...] = ()
    selected_id: Optional[str] = None
    next_serial: int = 1

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self.polygons)

    def __contains__(self, polygon_id: object) -> bool:
        return self.get(polygon_id) is not None  # type: ignore[arg-type]

    def all(self) -> Tuple[Polygon, ...]:
        """Returns all polygons in insertion order."""
        return self.polygons

    def get(self, polygon_id: Optional[str]) -> Optional[Polygon]:
        if polygon_id is None:
            return None
        for polygon in self.polygons:
            if polygon.id == polygon_id:
                return polygon
        return None

    @property
    def selected(self) -> Optional[Polygon]:
        return self.get(self.selected_id)

    def create(
        self, points: Iterable[Tuple[float, float]], color: str
    ) -> Tuple[PolygonStore, str]:
        """
        Appends a new polygon and returns the new store together with
        the id that was assigned to it.
        """
        polygon_id = f"polygon-{self.next_serial}"
        polygon = Polygon(id=polygon_id, points=as_points(points), color=color)
        logger.debug(f"Created {polygon_id} with {len(polygon)} points")
        store = dataclasses.replace(
            self,
            polygons=self.polygons + (polygon,),
            next_serial=self.next_serial + 1,
        )
        return store, polygon_id

    def _map(self, polygon_id: str, func) -> PolygonStore:
        found = False
        polygons = []
        for polygon in self.polygons:
            if polygon.id == polygon_id:
                found = True
                polygon = func(polygon)
            polygons.append(polygon)
        if not found:
            logger.warning(f"Ignoring update of unknown polygon {polygon_id}")
            return self
        return dataclasses.replace(self, polygons=tuple(polygons))

    def replace(
        self, polygon_id: str, points: Iterable[Tuple[float, float]]
    ) -> PolygonStore:
        """Replaces the whole point list of an existing polygon."""
        new_points = as_points(points)
        return self._map(polygon_id, lambda p: p.with_points(new_points))

    def set_point_at(
        self, polygon_id: str, index: int, point: Tuple[float, float]
    ) -> PolygonStore:
        """Moves a single vertex. Unknown ids and indices are ignored."""
        polygon = self.get(polygon_id)
        if polygon is None or not 0 <= index < len(polygon.points):
            logger.warning(
                f"Ignoring move of point {index} on polygon {polygon_id}"
            )
            return self
        moved = Point(float(point[0]), float(point[1]))
        return self._map(polygon_id, lambda p: p.with_point_at(index, moved))

    def delete(self, polygon_id: str) -> PolygonStore:
        """
        Removes a polygon. The selection is cleared if it referenced the
        deleted polygon.
        """
        polygons = tuple(p for p in self.polygons if p.id != polygon_id)
        if len(polygons) == len(self.polygons):
            logger.warning(f"Ignoring delete of unknown polygon {polygon_id}")
            return self
        selected_id = self.selected_id
        if selected_id == polygon_id:
            selected_id = None
        logger.debug(f"Deleted {polygon_id}")
        return dataclasses.replace(
            self, polygons=polygons, selected_id=selected_id
        )

    def select(self, polygon_id: Optional[str]) -> PolygonStore:
        """
        Sets the selection. Selecting an id that is not in the store
        clears the selection instead.
        """
        if polygon_id is not None and polygon_id not in self:
            logger.warning(f"Cannot select unknown polygon {polygon_id}")
            polygon_id = None
        if polygon_id == self.selected_id:
            return self
        return dataclasses.replace(self, selected_id=polygon_id)
