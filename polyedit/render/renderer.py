"""
Turns an editor snapshot into drawing calls on a `Surface`.

Rendering is stateless: the same snapshot always produces the same
calls. Geometry is converted to screen space here, so line widths and
handle sizes stay constant in pixels regardless of zoom.
"""
import math
from typing import Optional, Sequence, Tuple
from ..core.config import EditorSettings
from ..core.palette import hex_to_rgba
from ..core.polygon import Point, Polygon
from ..core.viewport import ViewportState
from ..editor.mode import EditMode
from ..editor.state import EditorState
from .surface import Surface

BACKGROUND = (1.0, 1.0, 1.0, 1.0)
GRID_COLOR = hex_to_rgba("#e5e7eb")
SELECTED_OUTLINE = (0.0, 0.0, 0.0, 1.0)
HANDLE_FILL = (1.0, 1.0, 1.0, 1.0)
HANDLE_OUTLINE = (0.0, 0.0, 0.0, 1.0)
DRAFT_COLOR = "#3b82f6"
ACTIVE_HANDLE_FILL = hex_to_rgba(DRAFT_COLOR)
FILL_ALPHA = 0x20 / 255.0


def _to_screen(
    viewport: ViewportState, points: Sequence[Point]
) -> Tuple[Tuple[float, float], ...]:
    return viewport.matrix.transform_points(points)


def render_grid(
    surface: Surface,
    viewport: ViewportState,
    width: float,
    height: float,
    grid_size: float,
):
    """Draws grid lines every `grid_size` world units over the view."""
    x0, y0 = viewport.to_world((0, 0))
    x1, y1 = viewport.to_world((width, height))
    start_x = math.floor(x0 / grid_size) * grid_size
    start_y = math.floor(y0 / grid_size) * grid_size

    x = start_x
    while x <= x1 + grid_size:
        sx = viewport.to_screen((x, 0)).x
        surface.path([(sx, 0.0), (sx, float(height))], close=False)
        surface.stroke(GRID_COLOR, 1.0)
        x += grid_size

    y = start_y
    while y <= y1 + grid_size:
        sy = viewport.to_screen((0, y)).y
        surface.path([(0.0, sy), (float(width), sy)], close=False)
        surface.stroke(GRID_COLOR, 1.0)
        y += grid_size


def render_polygon(
    surface: Surface,
    polygon: Polygon,
    viewport: ViewportState,
    selected: bool,
):
    if len(polygon.points) < 2:
        return
    points = _to_screen(viewport, polygon.points)
    outline = SELECTED_OUTLINE if selected else hex_to_rgba(polygon.color)
    line_width = 3.0 if selected else 2.0

    if polygon.is_complete:
        surface.path(points, close=True)
        surface.fill(hex_to_rgba(polygon.color, FILL_ALPHA), preserve=True)
    else:
        surface.path(points, close=False)
    surface.stroke(outline, line_width)


def render_control_points(
    surface: Surface,
    polygon: Polygon,
    viewport: ViewportState,
    radius: float,
    active_index: Optional[int],
):
    for index, point in enumerate(_to_screen(viewport, polygon.points)):
        surface.circle(point, radius)
        if index == active_index:
            surface.fill(ACTIVE_HANDLE_FILL, preserve=True)
        else:
            surface.fill(HANDLE_FILL, preserve=True)
        surface.stroke(HANDLE_OUTLINE, 2.0)


def render_draft(
    surface: Surface,
    draft: Sequence[Point],
    viewport: ViewportState,
    point_radius: float,
):
    if not draft:
        return
    points = _to_screen(viewport, draft)
    color = hex_to_rgba(DRAFT_COLOR)

    if len(points) > 2:
        surface.path(points, close=True)
        surface.fill(hex_to_rgba(DRAFT_COLOR, FILL_ALPHA))

    surface.path(points, close=False)
    surface.stroke(color, 2.0)

    for point in points:
        surface.circle(point, point_radius)
        surface.fill(color)


def render(
    state: EditorState,
    surface: Surface,
    width: float,
    height: float,
    settings: Optional[EditorSettings] = None,
):
    """Draws a complete frame for `state` onto `surface`."""
    settings = settings or EditorSettings()
    viewport = state.viewport
    surface.clear(BACKGROUND)
    render_grid(surface, viewport, width, height, settings.grid_size)

    mode = state.mode
    for polygon in state.polygons:
        selected = polygon.id == state.selected_id
        render_polygon(surface, polygon, viewport, selected)
        if selected and isinstance(mode, EditMode):
            render_control_points(
                surface,
                polygon,
                viewport,
                settings.control_point_radius_px,
                state.drag_index,
            )

    render_draft(
        surface, state.draft_path, viewport, settings.draft_point_radius_px
    )
