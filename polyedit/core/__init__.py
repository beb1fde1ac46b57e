from .polygon import Point, Polygon
from .viewport import ViewportState
from .store import PolygonStore

__all__ = [
    "Point",
    "Polygon",
    "ViewportState",
    "PolygonStore",
]
