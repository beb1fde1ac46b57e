import math
from typing import Sequence, Tuple
import cairo
from ..core.palette import ColorRGBA
from .surface import Surface


class CairoSurface(Surface):
    """Draws onto a cairo context, e.g. the one of a GTK snapshot."""

    def __init__(self, ctx: cairo.Context):
        self.ctx = ctx

    def clear(self, color: ColorRGBA):
        self.ctx.save()
        self.ctx.set_source_rgba(*color)
        self.ctx.set_operator(cairo.OPERATOR_SOURCE)
        self.ctx.paint()
        self.ctx.restore()

    def path(self, points: Sequence[Tuple[float, float]], close: bool):
        ctx = self.ctx
        ctx.new_path()
        if not points:
            return
        ctx.move_to(*points[0])
        for point in points[1:]:
            ctx.line_to(*point)
        if close:
            ctx.close_path()

    def circle(self, center: Tuple[float, float], radius: float):
        self.ctx.new_path()
        self.ctx.arc(center[0], center[1], radius, 0, 2 * math.pi)
        self.ctx.close_path()

    def fill(self, color: ColorRGBA, preserve: bool = False):
        self.ctx.set_source_rgba(*color)
        if preserve:
            self.ctx.fill_preserve()
        else:
            self.ctx.fill()

    def stroke(self, color: ColorRGBA, width: float):
        self.ctx.set_source_rgba(*color)
        self.ctx.set_line_width(width)
        self.ctx.stroke()
