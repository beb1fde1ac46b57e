import logging
from gi.repository import Adw, Gio, Gtk  # type: ignore
from .core.config import Config, ConfigManager
from .editor.machine import Editor
from .editor.mode import DrawMode, mode_hints
from .editor.state import EditorState
from .widgets.canvas import PolygonCanvas

logger = logging.getLogger(__name__)


class MainWindow(Adw.ApplicationWindow):
    def __init__(self, config_mgr: ConfigManager, **kwargs):
        super().__init__(**kwargs)
        self.set_title(_("Polygon Editor"))
        self.set_default_size(1000, 700)

        self.config_mgr = config_mgr
        config = config_mgr.config
        self.editor = Editor(config.settings)
        config.changed.connect(self.on_config_changed)

        reload_action = Gio.SimpleAction.new("reload-config", None)
        reload_action.connect("activate", self.on_reload_config)
        self.add_action(reload_action)

        vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        self.set_content(vbox)

        header = Adw.HeaderBar()
        vbox.append(header)

        self.canvas = PolygonCanvas(self.editor)

        self.new_button = Gtk.Button(label=_("New Polygon"))
        self.new_button.connect("clicked", lambda b: self.editor.start_draw())
        header.pack_start(self.new_button)

        reset_button = Gtk.Button(icon_name="zoom-original-symbolic")
        reset_button.set_tooltip_text(_("Reset view"))
        reset_button.connect("clicked", lambda b: self.editor.reset_view())
        header.pack_end(reset_button)

        zoom_out_button = Gtk.Button(icon_name="zoom-out-symbolic")
        zoom_out_button.set_tooltip_text(_("Zoom Out"))
        zoom_out_button.connect(
            "clicked", lambda b: self.editor.zoom_out(self.canvas.center())
        )
        header.pack_end(zoom_out_button)

        zoom_in_button = Gtk.Button(icon_name="zoom-in-symbolic")
        zoom_in_button.set_tooltip_text(_("Zoom In"))
        zoom_in_button.connect(
            "clicked", lambda b: self.editor.zoom_in(self.canvas.center())
        )
        header.pack_end(zoom_in_button)

        vbox.append(self.canvas)

        self.status = Gtk.Label(xalign=0)
        self.status.set_margin_start(6)
        self.status.set_margin_end(6)
        vbox.append(self.status)

        self.editor.changed.connect(self.on_editor_changed)
        self.on_editor_changed(self.editor, state=self.editor.state)
        self.canvas.grab_focus()

    def on_reload_config(self, action, param):
        self.config_mgr.reload()

    def on_config_changed(self, sender: Config, **kwargs):
        self.editor.settings = sender.settings
        self.canvas.queue_draw()

    def on_editor_changed(self, sender, state: EditorState):
        zoom = round(state.viewport.scale * 100)
        hints = " · ".join(mode_hints(state.mode))
        self.status.set_text(
            _("Zoom: {zoom}% | Polygons: {count} | {hints}").format(
                zoom=zoom, count=len(state.polygons), hints=hints
            )
        )
        self.new_button.set_sensitive(not isinstance(state.mode, DrawMode))
