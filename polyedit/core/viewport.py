from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple
from .matrix import Matrix
from .polygon import Point

logger = logging.getLogger(__name__)

MIN_SCALE = 0.1
MAX_SCALE = 5.0


def clamp_scale(
    scale: float, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE
) -> float:
    return max(min_scale, min(max_scale, scale))


@dataclass(frozen=True)
class ViewportState:
    """
    The view onto the canvas: screen = world * scale + offset.

    Instances are immutable; every operation returns a new state. The
    scale is clamped on construction, so it can never reach zero and
    the inverse mapping is always defined.
    """

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self):
        # Bypass the frozen guard to normalize the stored scale.
        object.__setattr__(self, "scale", clamp_scale(self.scale))

    @property
    def offset(self) -> Tuple[float, float]:
        return self.offset_x, self.offset_y

    @property
    def matrix(self) -> Matrix:
        """The world-to-screen transform as an affine matrix."""
        return Matrix.translation(self.offset_x, self.offset_y) @ Matrix.scale(
            self.scale, self.scale
        )

    def to_world(self, screen_point: Tuple[float, float]) -> Point:
        return Point(
            (screen_point[0] - self.offset_x) / self.scale,
            (screen_point[1] - self.offset_y) / self.scale,
        )

    def to_screen(self, world_point: Tuple[float, float]) -> Point:
        return Point(
            world_point[0] * self.scale + self.offset_x,
            world_point[1] * self.scale + self.offset_y,
        )

    def world_radius(self, pixels: float) -> float:
        """
        Converts a distance in screen pixels into world units, so hit
        tolerances look the same at every zoom level.
        """
        return pixels / self.scale

    def zoom_at(
        self,
        anchor: Tuple[float, float],
        factor: float,
    ) -> ViewportState:
        """
        Multiplies the scale by `factor` while keeping the world point
        under the screen `anchor` in place.
        """
        new_scale = clamp_scale(self.scale * factor)
        if new_scale == self.scale:
            return self
        ratio = new_scale / self.scale
        ax, ay = anchor
        return ViewportState(
            scale=new_scale,
            offset_x=ax - (ax - self.offset_x) * ratio,
            offset_y=ay - (ay - self.offset_y) * ratio,
        )

    def pan_by(self, delta: Tuple[float, float]) -> ViewportState:
        return replace(
            self,
            offset_x=self.offset_x + delta[0],
            offset_y=self.offset_y + delta[1],
        )

    def zoom_in(
        self,
        step: float = 1.2,
        anchor: Optional[Tuple[float, float]] = None,
    ) -> ViewportState:
        """
        Zooms in by a fixed step. Without an anchor the offset is left
        untouched, which scales the scene about the world origin.
        """
        if anchor is not None:
            return self.zoom_at(anchor, step)
        return replace(self, scale=clamp_scale(self.scale * step))

    def zoom_out(
        self,
        step: float = 1.2,
        anchor: Optional[Tuple[float, float]] = None,
    ) -> ViewportState:
        if anchor is not None:
            return self.zoom_at(anchor, 1 / step)
        return replace(self, scale=clamp_scale(self.scale / step))

    @staticmethod
    def reset() -> ViewportState:
        return ViewportState()
