from .surface import Surface, RecordingSurface
from .renderer import render

__all__ = ["Surface", "RecordingSurface", "render"]
