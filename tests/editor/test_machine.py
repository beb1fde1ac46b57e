import pytest
from polyedit.core.config import EditorSettings
from polyedit.core.palette import DEFAULT_PALETTE
from polyedit.core.polygon import Point
from polyedit.core.viewport import MAX_SCALE, MIN_SCALE, ViewportState
from polyedit.editor.events import (
    DeletePolygon,
    EditPoints,
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
from polyedit.editor.machine import transition
from polyedit.editor.mode import DrawMode, EditMode, SelectMode
from polyedit.editor.state import EditorState

TRIANGLE = [(0, 0), (10, 0), (10, 10)]
SETTINGS = EditorSettings()


def run(state, *events):
    for event in events:
        state = transition(state, event, SETTINGS)
        assert_invariants(state)
    return state


def assert_invariants(state: EditorState):
    store = state.store
    assert MIN_SCALE <= state.viewport.scale <= MAX_SCALE
    if state.selected_id is not None:
        assert state.selected_id in store
    if isinstance(state.mode, EditMode):
        assert state.selected_id == state.mode.target_id
    if isinstance(state.mode, DrawMode):
        if state.mode.replacing_id is not None:
            assert state.selected_id == state.mode.replacing_id
    else:
        assert state.draft_path == ()
    assert not (state.drag and state.pan)
    if state.drag:
        polygon = store.get(state.drag.polygon_id)
        assert polygon is not None
        assert 0 <= state.drag.point_index < len(polygon.points)


def draw_polygon(state, points):
    """Draws and closes a polygon by clicking its points at scale 1."""
    events = [StartDraw()]
    events += [PrimaryClick(x, y) for x, y in points]
    first = points[0]
    events.append(PrimaryClick(first[0] + 1, first[1] + 1))
    return run(state, *events)


@pytest.fixture
def state():
    return EditorState()


@pytest.fixture
def one_triangle(state):
    return draw_polygon(state, TRIANGLE)


@pytest.fixture
def two_squares(state):
    state = draw_polygon(state, [(0, 0), (100, 0), (100, 100), (0, 100)])
    return draw_polygon(
        state, [(50, 50), (150, 50), (150, 150), (50, 150)]
    )


class TestDrawing:
    def test_start_draw(self, one_triangle):
        state = run(one_triangle, StartDraw())
        assert state.mode == DrawMode()
        assert state.selected_id is None
        assert state.draft_path == ()

    def test_clicks_append_world_points(self, state):
        state = run(
            EditorState(viewport=ViewportState(2, 10, 20)),
            StartDraw(),
            PrimaryClick(10, 20),
            PrimaryClick(30, 40),
        )
        assert state.draft_path == (Point(0, 0), Point(10, 10))

    def test_close_draft(self, state):
        state = run(state, StartDraw(), *[PrimaryClick(*p) for p in TRIANGLE])
        assert len(state.draft_path) == 3

        state = run(state, PrimaryClick(1, 1))
        assert isinstance(state.mode, SelectMode)
        assert state.draft_path == ()
        assert len(state.polygons) == 1
        polygon = state.polygons[0]
        assert polygon.points == (Point(0, 0), Point(10, 0), Point(10, 10))
        assert state.selected_id == polygon.id

    def test_two_points_never_close(self, state):
        state = run(
            state,
            StartDraw(),
            PrimaryClick(0, 0),
            PrimaryClick(10, 0),
            PrimaryClick(1, 1),
        )
        assert isinstance(state.mode, DrawMode)
        assert len(state.draft_path) == 3
        assert state.polygons == ()

    def test_close_threshold_depends_on_scale(self, state):
        state = EditorState(viewport=ViewportState(scale=2))
        state = run(
            state,
            StartDraw(),
            PrimaryClick(0, 0),
            PrimaryClick(20, 0),
            PrimaryClick(20, 20),
            # World distance 15 from the first point, radius is 20/2.
            PrimaryClick(30, 0),
        )
        assert len(state.draft_path) == 4
        # World distance 8.
        state = run(state, PrimaryClick(16, 0))
        assert isinstance(state.mode, SelectMode)
        assert len(state.polygons[0].points) == 4

    def test_colors_follow_store_size(self, two_squares):
        colors = [p.color for p in two_squares.polygons]
        assert colors == list(DEFAULT_PALETTE[:2])

        first = two_squares.polygons[0].id
        state = run(two_squares, DeletePolygon(first))
        state = draw_polygon(state, TRIANGLE)
        assert state.polygons[-1].color == DEFAULT_PALETTE[1]

    def test_new_ids_are_unique(self, two_squares):
        first = two_squares.polygons[0].id
        state = run(two_squares, DeletePolygon(first))
        state = draw_polygon(state, TRIANGLE)
        ids = [p.id for p in state.polygons]
        assert first not in ids
        assert len(set(ids)) == len(ids)


class TestSelecting:
    def test_click_selects_first_match_in_store_order(self, two_squares):
        state = run(two_squares, KeyEscape(), PrimaryClick(70, 70))
        assert state.selected_id == two_squares.polygons[0].id

        state = run(state, PrimaryClick(120, 120))
        assert state.selected_id == two_squares.polygons[1].id

    def test_click_on_background_clears_selection(self, two_squares):
        state = run(two_squares, PrimaryClick(300, 300))
        assert state.selected_id is None

    def test_click_ignores_incomplete_polygons(self, one_triangle):
        polygon_id = one_triangle.polygons[0].id
        store = one_triangle.store.replace(polygon_id, [(0, 0), (50, 50)])
        state = EditorState(store=store.select(None))
        state = run(state, PrimaryClick(8, 2))
        assert state.selected_id is None

    def test_unchanged_selection_returns_same_state(self, one_triangle):
        state = run(one_triangle, PrimaryClick(8, 2))
        assert run(state, PrimaryClick(8, 3)) is state

    def test_select_polygon_command(self, two_squares):
        target = two_squares.polygons[0].id
        state = run(two_squares, StartDraw(), PrimaryClick(50, 50))
        state = run(state, SelectPolygon(target))
        assert isinstance(state.mode, SelectMode)
        assert state.selected_id == target
        assert state.draft_path == ()


class TestEditing:
    def test_edit_points_command(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, KeyEscape(), EditPoints(target))
        assert state.mode == EditMode(target)
        assert state.selected_id == target

    def test_edit_unknown_polygon_is_ignored(self, one_triangle):
        assert run(one_triangle, EditPoints("nope")) is one_triangle

    def test_click_on_control_point_keeps_editing(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, EditPoints(target))
        assert run(state, PrimaryClick(10.5, 0.5)) is state

    def test_click_elsewhere_finishes_editing(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, EditPoints(target), PrimaryClick(50, 50))
        assert isinstance(state.mode, SelectMode)
        assert state.selected_id is None

    def test_drag_control_point(self, two_squares):
        target = two_squares.polygons[1].id
        before = two_squares.polygons[1].points
        other = two_squares.polygons[0]
        state = run(
            two_squares,
            EditPoints(target),
            PointerDown(150, 50),
        )
        assert state.drag_index == 1
        assert state.is_dragging and not state.is_panning
        state = run(state, PointerMove(30, 40), PointerMove(5, 5))
        moved = state.store.get(target)
        assert moved.points[1] == Point(5, 5)
        assert moved.points[0] == before[0]
        assert moved.points[2:] == before[2:]
        assert state.polygons[0] == other

        state = run(state, PointerUp(), PointerMove(90, 90))
        assert state.drag is None
        assert state.store.get(target).points[1] == Point(5, 5)

    def test_click_after_drag_is_suppressed(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(
            one_triangle,
            EditPoints(target),
            PointerDown(10, 10),
            PointerMove(40, 40),
            PointerUp(),
            PrimaryClick(40, 40),
        )
        assert state.mode == EditMode(target)
        assert not state.suppress_click

    def test_drag_radius_depends_on_scale(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, EditPoints(target), ZoomIn(), ZoomIn())
        scale = state.viewport.scale
        # 8 pixels away on screen is inside the 10 pixel handle radius.
        screen = state.viewport.to_screen((10, 0))
        state = run(state, PointerDown(screen.x + 8, screen.y))
        assert state.drag_index == 1
        assert scale == pytest.approx(1.44)

    def test_pointer_down_outside_handles_does_nothing(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, EditPoints(target))
        assert run(state, PointerDown(50, 50)) is state

    def test_pointer_down_in_select_mode_does_not_drag(self, one_triangle):
        state = run(one_triangle, PointerDown(0, 0))
        assert state.drag is None


class TestReplaceDraw:
    def test_start_replace_draw_clears_points(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, StartReplaceDraw(target))
        assert isinstance(state.mode, DrawMode)
        assert state.mode.replacing_id == target
        assert state.store.get(target).points == ()
        assert state.selected_id == target
        assert state.draft_path == ()

    def test_closing_replaces_points(self, one_triangle):
        original = one_triangle.polygons[0]
        square = [(100, 100), (200, 100), (200, 200), (100, 200)]
        state = run(
            one_triangle,
            StartReplaceDraw(original.id),
            *[PrimaryClick(*p) for p in square],
            PrimaryClick(101, 101),
        )
        assert len(state.polygons) == 1
        polygon = state.polygons[0]
        assert polygon.id == original.id
        assert polygon.color == original.color
        assert len(polygon.points) == 4
        assert state.selected_id == original.id
        assert isinstance(state.mode, SelectMode)

    def test_escape_restores_original_points(self, one_triangle):
        original = one_triangle.polygons[0]
        state = run(
            one_triangle,
            StartReplaceDraw(original.id),
            PrimaryClick(50, 50),
            KeyEscape(),
        )
        assert state.store.get(original.id).points == original.points
        assert state.selected_id is None

    @pytest.mark.parametrize("command", [StartDraw(), ResetView()])
    def test_other_commands_during_replace(self, one_triangle, command):
        original = one_triangle.polygons[0]
        state = run(one_triangle, StartReplaceDraw(original.id), command)
        if isinstance(command, StartDraw):
            assert state.store.get(original.id).points == original.points
            assert state.mode == DrawMode()
        else:
            # View changes keep the redraw going.
            assert state.mode.replacing_id == original.id

    def test_replace_unknown_polygon_is_ignored(self, one_triangle):
        assert run(one_triangle, StartReplaceDraw("nope")) is one_triangle

    def test_delete_while_replacing(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(
            one_triangle,
            StartReplaceDraw(target),
            PrimaryClick(1, 1),
            DeletePolygon(target),
        )
        assert state.polygons == ()
        assert isinstance(state.mode, SelectMode)
        assert state.draft_path == ()


class TestDeleting:
    @pytest.mark.parametrize(
        "prepare",
        [
            lambda pid: [SelectPolygon(pid)],
            lambda pid: [EditPoints(pid)],
            lambda pid: [EditPoints(pid), PointerDown(0, 0)],
            lambda pid: [StartReplaceDraw(pid)],
        ],
    )
    def test_delete_selected_forces_select(self, one_triangle, prepare):
        target = one_triangle.polygons[0].id
        state = run(one_triangle, *prepare(target), DeletePolygon(target))
        assert state.selected_id is None
        assert isinstance(state.mode, SelectMode)
        assert state.drag is None
        assert target not in state.store

    def test_delete_unselected_keeps_mode(self, two_squares):
        first, second = [p.id for p in two_squares.polygons]
        state = run(two_squares, EditPoints(first), DeletePolygon(second))
        assert state.mode == EditMode(first)
        assert state.selected_id == first
        assert len(state.polygons) == 1

    def test_delete_unknown_is_ignored(self, one_triangle):
        assert run(one_triangle, DeletePolygon("nope")) is one_triangle


class TestViewport:
    def test_middle_button_pans(self, state):
        state = run(
            state,
            PointerDown(100, 100, MouseButton.MIDDLE),
            PointerMove(110, 95),
            PointerMove(130, 90),
        )
        assert state.viewport.offset == (30, -10)
        assert state.is_panning and not state.is_dragging
        state = run(state, PointerUp())
        assert state.pan is None

    def test_ctrl_primary_pans(self, one_triangle):
        state = run(
            one_triangle,
            PointerDown(0, 0, MouseButton.PRIMARY, pan_modifier=True),
            PointerMove(-5, 5),
            PointerUp(),
        )
        assert state.viewport.offset == (-5, 5)

    def test_click_after_pan_is_suppressed(self, one_triangle):
        state = run(
            one_triangle,
            PointerDown(300, 300, MouseButton.PRIMARY, pan_modifier=True),
            PointerMove(310, 300),
            PointerUp(),
            PrimaryClick(310, 300),
        )
        # The click over the background did not clear the selection.
        assert state.selected_id == one_triangle.selected_id
        assert not state.suppress_click

    def test_suppression_cleared_by_next_press(self, one_triangle):
        state = run(
            one_triangle,
            PointerDown(300, 300, MouseButton.MIDDLE),
            PointerUp(),
            PointerDown(300, 300),
            PointerUp(),
            PrimaryClick(300, 300),
        )
        assert state.selected_id is None

    def test_drawing_while_panned(self, state):
        state = run(
            state,
            PointerDown(0, 0, MouseButton.MIDDLE),
            PointerMove(100, 50),
            PointerUp(),
            StartDraw(),
            PrimaryClick(100, 50),
        )
        assert state.draft_path == (Point(0, 0),)

    def test_wheel_zooms_around_cursor(self, state):
        anchor_world = state.viewport.to_world((200, 100))
        zoomed_out = run(state, Wheel(200, 100, 1))
        assert zoomed_out.viewport.scale == pytest.approx(0.9)
        anchor_after = zoomed_out.viewport.to_world((200, 100))
        assert tuple(anchor_after) == pytest.approx(tuple(anchor_world))
        zoomed_in = run(state, Wheel(200, 100, -3))
        assert zoomed_in.viewport.scale == pytest.approx(1.1)

    def test_wheel_without_delta_is_ignored(self, state):
        assert run(state, Wheel(0, 0, 0)) is state

    def test_wheel_stays_in_range(self, state):
        for _ in range(60):
            state = run(state, Wheel(10, 10, -1))
        assert state.viewport.scale == MAX_SCALE
        for _ in range(60):
            state = run(state, Wheel(10, 10, 1))
        assert state.viewport.scale == MIN_SCALE

    def test_zoom_buttons_and_reset(self, state):
        state = run(state, ZoomIn(), ZoomIn())
        assert state.viewport.scale == pytest.approx(1.44)
        state = run(state, ZoomOut(anchor=(50, 50)))
        assert state.viewport.scale == pytest.approx(1.2)
        state = run(state, ResetView())
        assert state.viewport == ViewportState()

    @pytest.mark.parametrize(
        "event", [ZoomIn(), ZoomIn(anchor=(5, 5)), Wheel(5, 5, -1)]
    )
    def test_zoom_beyond_limit_keeps_state(self, event):
        state = EditorState(viewport=ViewportState(scale=MAX_SCALE))
        assert run(state, event) is state

    def test_reset_of_default_view_keeps_state(self, state):
        assert run(state, ResetView()) is state


class TestEscape:
    def assert_reset(self, state):
        assert state.mode == SelectMode()
        assert state.draft_path == ()
        assert state.selected_id is None
        assert state.drag is None
        assert state.pan is None

    def test_escape_from_draw(self, one_triangle):
        state = run(
            one_triangle,
            StartDraw(),
            PrimaryClick(40, 40),
            PrimaryClick(50, 40),
            KeyEscape(),
        )
        self.assert_reset(state)
        assert len(state.polygons) == 1

    def test_escape_from_drag(self, one_triangle):
        target = one_triangle.polygons[0].id
        state = run(
            one_triangle,
            EditPoints(target),
            PointerDown(0, 0),
            PointerMove(3, 3),
            KeyEscape(),
        )
        self.assert_reset(state)
        # The drag so far is kept, nothing else is touched.
        assert state.store.get(target).points[0] == Point(3, 3)

    def test_escape_from_select(self, one_triangle):
        self.assert_reset(run(one_triangle, KeyEscape()))

    def test_escape_during_pan(self, state):
        state = run(state, PointerDown(0, 0, MouseButton.MIDDLE), KeyEscape())
        self.assert_reset(state)


def test_unknown_event_is_ignored(state):
    assert transition(state, object()) is state
