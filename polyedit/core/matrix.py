from typing import Any, Iterable, Tuple
import numpy as np


class Matrix:
    """
    A 3x3 affine transform in homogeneous coordinates, backed by numpy.

    The canvas only ever translates and scales uniformly, but renderers
    want a single object they can push points through, so the view is
    expressed as a product of these matrices.
    """

    def __init__(self, data: Any = None):
        if data is None:
            self.m: np.ndarray = np.identity(3, dtype=float)
            return
        try:
            self.m = np.array(data, dtype=float)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Could not create Matrix from data: {e}")
        if self.m.shape != (3, 3):
            raise ValueError("Input data must be a 3x3 matrix.")

    def __matmul__(self, other: "Matrix") -> "Matrix":
        """`a @ b` maps a point through `b` first, then `a`."""
        if not isinstance(other, Matrix):
            return NotImplemented
        return Matrix(self.m @ other.m)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return False
        return bool(np.allclose(self.m, other.m))

    def __repr__(self) -> str:
        return f"Matrix({self.m.tolist()})"

    @staticmethod
    def translation(tx: float, ty: float) -> "Matrix":
        m = Matrix()
        m.m[0, 2] = tx
        m.m[1, 2] = ty
        return m

    @staticmethod
    def scale(sx: float, sy: float) -> "Matrix":
        return Matrix(np.diag([sx, sy, 1.0]))

    def transform_point(
        self, point: Tuple[float, float]
    ) -> Tuple[float, float]:
        x, y, _w = self.m @ np.array([point[0], point[1], 1.0])
        return float(x), float(y)

    def transform_points(
        self, points: Iterable[Tuple[float, float]]
    ) -> Tuple[Tuple[float, float], ...]:
        """Maps a whole polyline at once."""
        coords = np.array(list(points), dtype=float).reshape(-1, 2)
        if not len(coords):
            return ()
        homogeneous = np.hstack([coords, np.ones((len(coords), 1))])
        mapped = homogeneous @ self.m.T
        return tuple((float(x), float(y)) for x, y in mapped[:, :2])
