import logging
from gi.repository import Gdk, Graphene, Gtk  # type: ignore
from ..core.config import EditorSettings
from ..editor.events import MouseButton
from ..editor.machine import Editor
from ..render.cairosurface import CairoSurface
from ..render.renderer import render

logger = logging.getLogger(__name__)


class PolygonCanvas(Gtk.DrawingArea):
    """
    A drawing area that feeds GTK input into an `Editor` and paints its
    snapshots. It holds no editing state of its own.
    """

    # Pointer travel (in pixels) below which a press/release pair counts
    # as a click.
    CLICK_THRESHOLD = 4.0

    def __init__(self, editor: Editor, **kwargs):
        super().__init__(**kwargs)
        self.editor = editor
        self.set_hexpand(True)
        self.set_vexpand(True)
        self._setup_interactions()
        self.editor.changed.connect(self._on_editor_changed)

    @property
    def settings(self) -> EditorSettings:
        return self.editor.settings

    def _setup_interactions(self):
        """Initializes and attaches all GTK event controllers."""
        self._drag_gesture = Gtk.GestureDrag()
        self._drag_gesture.set_button(0)  # Any button
        self._drag_gesture.connect("drag-begin", self.on_button_press)
        self._drag_gesture.connect("drag-end", self.on_button_release)
        self.add_controller(self._drag_gesture)

        self._motion_controller = Gtk.EventControllerMotion()
        self._motion_controller.connect("motion", self.on_motion)
        self.add_controller(self._motion_controller)

        self._scroll_controller = Gtk.EventControllerScroll.new(
            Gtk.EventControllerScrollFlags.VERTICAL
        )
        self._scroll_controller.connect("scroll", self.on_scroll)
        self.add_controller(self._scroll_controller)

        self._key_controller = Gtk.EventControllerKey.new()
        self._key_controller.connect("key-pressed", self.on_key_pressed)
        self.add_controller(self._key_controller)
        self.set_focusable(True)
        self._pointer = (0.0, 0.0)
        self._press_button = MouseButton.PRIMARY

    def center(self):
        return self.get_width() / 2, self.get_height() / 2

    def do_snapshot(self, snapshot):
        """GTK4 snapshot-based drawing handler."""
        width, height = self.get_width(), self.get_height()
        bounds = Graphene.Rect().init(0, 0, width, height)
        ctx = snapshot.append_cairo(bounds)
        render(
            self.editor.state, CairoSurface(ctx), width, height, self.settings
        )

    def _on_editor_changed(self, sender, state):
        self.queue_draw()

    def on_button_press(self, gesture, x: float, y: float):
        self.grab_focus()
        button = gesture.get_current_button()
        state = gesture.get_current_event_state()
        ctrl = bool(state & Gdk.ModifierType.CONTROL_MASK)
        if button == Gdk.BUTTON_MIDDLE:
            button = MouseButton.MIDDLE
        elif button == Gdk.BUTTON_SECONDARY:
            button = MouseButton.SECONDARY
        else:
            button = MouseButton.PRIMARY
        self.editor.pointer_down(x, y, button, ctrl)
        self._press_button = button

    def on_motion(self, controller, x: float, y: float):
        self._pointer = (x, y)
        self.editor.pointer_move(x, y)

    def on_button_release(self, gesture, offset_x: float, offset_y: float):
        self.editor.pointer_up()
        ok, start_x, start_y = gesture.get_start_point()
        if not ok or self._press_button != MouseButton.PRIMARY:
            return
        travel = abs(offset_x) + abs(offset_y)
        if travel <= self.CLICK_THRESHOLD:
            self.editor.primary_click(start_x + offset_x, start_y + offset_y)

    def on_scroll(self, controller, dx: float, dy: float) -> bool:
        x, y = self._pointer
        if dy > 0:
            self.editor.wheel(x, y, 1)
        elif dy < 0:
            self.editor.wheel(x, y, -1)
        return True

    def on_key_pressed(
        self, controller, keyval: int, keycode: int, state: Gdk.ModifierType
    ) -> bool:
        """Handles key press events for the editor commands."""
        editor = self.editor
        selected_id = editor.state.selected_id

        if keyval == Gdk.KEY_Escape:
            editor.key_escape()
            return True
        elif keyval == Gdk.KEY_1:
            editor.reset_view()
            return True
        elif keyval in (Gdk.KEY_plus, Gdk.KEY_equal, Gdk.KEY_KP_Add):
            editor.zoom_in(self.center())
            return True
        elif keyval in (Gdk.KEY_minus, Gdk.KEY_KP_Subtract):
            editor.zoom_out(self.center())
            return True
        elif keyval == Gdk.KEY_n:
            editor.start_draw()
            return True

        if selected_id is None:
            return False
        if keyval in (Gdk.KEY_Delete, Gdk.KEY_BackSpace):
            editor.delete_polygon(selected_id)
            return True
        elif keyval == Gdk.KEY_e:
            editor.edit_points(selected_id)
            return True
        elif keyval == Gdk.KEY_r:
            editor.start_replace_draw(selected_id)
            return True
        return False
