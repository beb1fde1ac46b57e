# flake8: noqa: E402
import argparse
import gettext
import logging
import sys
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# --------------------------------------------------------
# Gettext MUST be initialized before importing app modules
# --------------------------------------------------------
base_dir = Path(__file__).parent.parent
locale_dir = base_dir / "polyedit" / "locale"
gettext.install("polyedit", locale_dir)

import gi

gi.require_version("Adw", "1")
gi.require_version("Gtk", "4.0")
from gi.repository import Adw  # type: ignore
from . import config as config_module
from .mainwindow import MainWindow


class App(Adw.Application):
    def __init__(self, args):
        super().__init__(application_id="org.polyedit.PolyEdit")
        self.args = args

    def do_activate(self):
        config_module.initialize_managers()
        assert config_module.config_mgr is not None
        self.set_accels_for_action("win.reload-config", ["F5"])
        win = MainWindow(config_module.config_mgr, application=self)
        win.present()


def main():
    parser = argparse.ArgumentParser(
        description=_("An interactive editor for 2D polygons.")
    )
    parser.add_argument(
        "--loglevel",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=_("Set the logging level (default: INFO)"),
    )

    args = parser.parse_args()

    # Set logging level based on the command-line argument
    log_level = getattr(logging, args.loglevel.upper(), logging.INFO)
    logging.getLogger().setLevel(log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Application starting with log level {args.loglevel.upper()}")

    app = App(args)
    exit_code = app.run(None)
    if config_module.config_mgr is not None:
        config_module.config_mgr.save()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
