"""
The interaction state machine.

`transition` is a pure function that folds one event into an
`EditorState`. `Editor` owns the current state, feeds events through
`transition` in arrival order and announces every new snapshot.
"""
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Callable, Dict, Optional, Tuple, Type
from blinker import Signal
from ..core.config import EditorSettings
from ..core.hittest import distance, find_polygon_at, nearest_control_point
from ..core.palette import color_for_index
from ..core.polygon import Point
from ..core.store import PolygonStore
from ..core.viewport import ViewportState
from .events import (
    DeletePolygon,
    EditPoints,
    Event,
    KeyEscape,
    MouseButton,
    PointerDown,
    PointerMove,
    PointerUp,
    PrimaryClick,
    ResetView,
    SelectPolygon,
    StartDraw,
    StartReplaceDraw,
    Wheel,
    ZoomIn,
    ZoomOut,
)
from .mode import DragState, DrawMode, EditMode, PanState, SelectMode
from .state import EditorState

logger = logging.getLogger(__name__)

Handler = Callable[[EditorState, Event, EditorSettings], EditorState]


def _restore_replaced(state: EditorState) -> PolygonStore:
    """
    Returns the store with an abandoned redraw undone: the polygon being
    redrawn gets its original points back.
    """
    mode = state.mode
    store = state.store
    if isinstance(mode, DrawMode) and mode.replacing_id is not None:
        if mode.replacing_id in store:
            logger.debug(f"Restoring points of {mode.replacing_id}")
            store = store.replace(mode.replacing_id, mode.original_points)
    return store


def _enter(state: EditorState, store: PolygonStore, mode) -> EditorState:
    """Switches mode, dropping every gesture in progress."""
    return replace(
        state,
        store=store,
        mode=mode,
        draft_path=(),
        drag=None,
        pan=None,
        suppress_click=False,
    )


def _control_point_at(
    state: EditorState, polygon_id: str, world: Point, settings
) -> Optional[int]:
    polygon = state.store.get(polygon_id)
    if polygon is None:
        return None
    radius = state.viewport.world_radius(settings.handle_radius_px)
    return nearest_control_point(world, polygon, radius)


def _with_viewport(state: EditorState, viewport: ViewportState) -> EditorState:
    if viewport == state.viewport:
        return state
    return replace(state, viewport=viewport)


def _finish_draft(state: EditorState, settings: EditorSettings) -> EditorState:
    mode = state.mode
    store = state.store
    assert isinstance(mode, DrawMode)
    if mode.replacing_id is not None and mode.replacing_id in store:
        polygon_id = mode.replacing_id
        store = store.replace(polygon_id, state.draft_path)
    else:
        color = color_for_index(len(store), settings.palette)
        store, polygon_id = store.create(state.draft_path, color)
    logger.info(
        f"Closed {polygon_id} with {len(state.draft_path)} points"
    )
    return _enter(state, store.select(polygon_id), SelectMode())


def on_primary_click(
    state: EditorState, event: PrimaryClick, settings: EditorSettings
) -> EditorState:
    if state.suppress_click:
        return replace(state, suppress_click=False)
    if state.is_panning or state.is_dragging:
        return state

    world = state.viewport.to_world((event.x, event.y))
    mode = state.mode

    if isinstance(mode, DrawMode):
        draft = state.draft_path
        close_radius = state.viewport.world_radius(settings.close_radius_px)
        if len(draft) > 2 and distance(world, draft[0]) < close_radius:
            return _finish_draft(state, settings)
        return replace(state, draft_path=draft + (world,))

    if isinstance(mode, EditMode):
        index = _control_point_at(state, mode.target_id, world, settings)
        if index is not None:
            return state
        return _enter(state, state.store.select(None), SelectMode())

    hit = find_polygon_at(world, state.store)
    store = state.store.select(hit.id if hit else None)
    if store is state.store:
        return state
    return replace(state, store=store)


def on_pointer_down(
    state: EditorState, event: PointerDown, settings: EditorSettings
) -> EditorState:
    is_pan = event.button == MouseButton.MIDDLE or (
        event.button == MouseButton.PRIMARY and event.pan_modifier
    )
    if is_pan:
        return replace(
            state,
            pan=PanState(Point(event.x, event.y)),
            drag=None,
            suppress_click=True,
        )

    # A click that was not preceded by a pan or drag must not be eaten.
    if state.suppress_click:
        state = replace(state, suppress_click=False)

    mode = state.mode
    if isinstance(mode, EditMode) and event.button == MouseButton.PRIMARY:
        world = state.viewport.to_world((event.x, event.y))
        index = _control_point_at(state, mode.target_id, world, settings)
        if index is not None:
            logger.debug(f"Dragging point {index} of {mode.target_id}")
            return replace(
                state,
                drag=DragState(mode.target_id, index),
                pan=None,
                suppress_click=True,
            )
    return state


def on_pointer_move(
    state: EditorState, event: PointerMove, settings: EditorSettings
) -> EditorState:
    if state.pan is not None:
        last = state.pan.last_screen_point
        delta = (event.x - last.x, event.y - last.y)
        return replace(
            state,
            viewport=state.viewport.pan_by(delta),
            pan=PanState(Point(event.x, event.y)),
        )

    if state.drag is not None:
        drag = state.drag
        polygon = state.store.get(drag.polygon_id)
        if polygon is None or drag.point_index >= len(polygon.points):
            return replace(state, drag=None)
        world = state.viewport.to_world((event.x, event.y))
        store = state.store.set_point_at(
            drag.polygon_id, drag.point_index, world
        )
        return replace(state, store=store)

    return state


def on_pointer_up(
    state: EditorState, event: PointerUp, settings: EditorSettings
) -> EditorState:
    if not (state.is_panning or state.is_dragging):
        return state
    return replace(state, pan=None, drag=None)


def on_wheel(
    state: EditorState, event: Wheel, settings: EditorSettings
) -> EditorState:
    if event.delta_sign == 0:
        return state
    if event.delta_sign > 0:
        factor = settings.wheel_zoom_out
    else:
        factor = settings.wheel_zoom_in
    viewport = state.viewport.zoom_at((event.x, event.y), factor)
    return _with_viewport(state, viewport)


def on_escape(
    state: EditorState, event: KeyEscape, settings: EditorSettings
) -> EditorState:
    store = _restore_replaced(state).select(None)
    return _enter(state, store, SelectMode())


def on_start_draw(
    state: EditorState, event: StartDraw, settings: EditorSettings
) -> EditorState:
    store = _restore_replaced(state).select(None)
    return _enter(state, store, DrawMode())


def on_start_replace_draw(
    state: EditorState, event: StartReplaceDraw, settings: EditorSettings
) -> EditorState:
    if event.polygon_id not in state.store:
        logger.warning(f"Cannot redraw unknown polygon {event.polygon_id}")
        return state
    store = _restore_replaced(state)
    polygon = store.get(event.polygon_id)
    assert polygon is not None
    store = store.replace(polygon.id, ()).select(polygon.id)
    mode = DrawMode(replacing_id=polygon.id, original_points=polygon.points)
    return _enter(state, store, mode)


def on_select_polygon(
    state: EditorState, event: SelectPolygon, settings: EditorSettings
) -> EditorState:
    store = _restore_replaced(state).select(event.polygon_id)
    return _enter(state, store, SelectMode())


def on_edit_points(
    state: EditorState, event: EditPoints, settings: EditorSettings
) -> EditorState:
    if event.polygon_id not in state.store:
        logger.warning(f"Cannot edit unknown polygon {event.polygon_id}")
        return state
    store = _restore_replaced(state).select(event.polygon_id)
    return _enter(state, store, EditMode(event.polygon_id))


def on_delete_polygon(
    state: EditorState, event: DeletePolygon, settings: EditorSettings
) -> EditorState:
    polygon_id = event.polygon_id
    if polygon_id not in state.store:
        logger.warning(f"Cannot delete unknown polygon {polygon_id}")
        return state
    was_selected = state.store.selected_id == polygon_id
    store = state.store.delete(polygon_id)
    if was_selected:
        return _enter(state, store, SelectMode())
    drag = state.drag
    if drag is not None and drag.polygon_id == polygon_id:
        drag = None
    return replace(state, store=store, drag=drag)


def on_zoom_in(
    state: EditorState, event: ZoomIn, settings: EditorSettings
) -> EditorState:
    viewport = state.viewport.zoom_in(settings.button_zoom_step, event.anchor)
    return _with_viewport(state, viewport)


def on_zoom_out(
    state: EditorState, event: ZoomOut, settings: EditorSettings
) -> EditorState:
    viewport = state.viewport.zoom_out(settings.button_zoom_step, event.anchor)
    return _with_viewport(state, viewport)


def on_reset_view(
    state: EditorState, event: ResetView, settings: EditorSettings
) -> EditorState:
    return _with_viewport(state, ViewportState.reset())


HANDLERS: Dict[Type, Handler] = {
    PrimaryClick: on_primary_click,
    PointerDown: on_pointer_down,
    PointerMove: on_pointer_move,
    PointerUp: on_pointer_up,
    Wheel: on_wheel,
    KeyEscape: on_escape,
    StartDraw: on_start_draw,
    StartReplaceDraw: on_start_replace_draw,
    SelectPolygon: on_select_polygon,
    EditPoints: on_edit_points,
    DeletePolygon: on_delete_polygon,
    ZoomIn: on_zoom_in,
    ZoomOut: on_zoom_out,
    ResetView: on_reset_view,
}


def transition(
    state: EditorState,
    event: Event,
    settings: Optional[EditorSettings] = None,
) -> EditorState:
    """
    Computes the state that follows `state` after `event`. Never raises
    for unknown ids or out-of-tolerance input; such events leave the
    state as it was.
    """
    handler = HANDLERS.get(type(event))
    if handler is None:
        logger.warning(f"Ignoring unsupported event {event!r}")
        return state
    return handler(state, event, settings or EditorSettings())


class Editor:
    """
    Owns the live editor state and applies events to it one at a time.

    Listeners connect to `changed`, which is sent with the new snapshot
    as `state` whenever an event produced a different state.
    """

    def __init__(
        self,
        settings: Optional[EditorSettings] = None,
        state: Optional[EditorState] = None,
    ):
        self.settings = settings or EditorSettings()
        self._state = state or EditorState()
        self.changed = Signal()

    @property
    def state(self) -> EditorState:
        return self._state

    def dispatch(self, event: Event) -> EditorState:
        old = self._state
        new = transition(old, event, self.settings)
        if new is old:
            return old
        if new.mode != old.mode:
            logger.debug(
                f"Mode {type(old.mode).__name__} -> {type(new.mode).__name__}"
            )
        self._state = new
        self.changed.send(self, state=new)
        return new

    # --- Input from the drawing surface ---

    def primary_click(self, x: float, y: float) -> EditorState:
        return self.dispatch(PrimaryClick(x, y))

    def pointer_down(
        self,
        x: float,
        y: float,
        button: int = MouseButton.PRIMARY,
        pan_modifier: bool = False,
    ) -> EditorState:
        return self.dispatch(PointerDown(x, y, button, pan_modifier))

    def pointer_move(self, x: float, y: float) -> EditorState:
        return self.dispatch(PointerMove(x, y))

    def pointer_up(self) -> EditorState:
        return self.dispatch(PointerUp())

    def wheel(self, x: float, y: float, delta_sign: int) -> EditorState:
        return self.dispatch(Wheel(x, y, delta_sign))

    def key_escape(self) -> EditorState:
        return self.dispatch(KeyEscape())

    # --- Commands from the surrounding UI ---

    def start_draw(self) -> EditorState:
        return self.dispatch(StartDraw())

    def start_replace_draw(self, polygon_id: str) -> EditorState:
        return self.dispatch(StartReplaceDraw(polygon_id))

    def select_polygon(self, polygon_id: str) -> EditorState:
        return self.dispatch(SelectPolygon(polygon_id))

    def edit_points(self, polygon_id: str) -> EditorState:
        return self.dispatch(EditPoints(polygon_id))

    def delete_polygon(self, polygon_id: str) -> EditorState:
        return self.dispatch(DeletePolygon(polygon_id))

    def zoom_in(
        self, anchor: Optional[Tuple[float, float]] = None
    ) -> EditorState:
        return self.dispatch(ZoomIn(anchor))

    def zoom_out(
        self, anchor: Optional[Tuple[float, float]] = None
    ) -> EditorState:
        return self.dispatch(ZoomOut(anchor))

    def reset_view(self) -> EditorState:
        return self.dispatch(ResetView())
