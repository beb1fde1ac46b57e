import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import yaml
from blinker import Signal
from .palette import DEFAULT_PALETTE, is_hex_color

logger = logging.getLogger(__name__)


def _palette_from(value: Any) -> Tuple[str, ...]:
    """Accepts a list of '#rrggbb' strings, raises ValueError otherwise."""
    if not isinstance(value, (list, tuple)):
        raise ValueError("palette must be a list of colors")
    bad = [c for c in value if not is_hex_color(c)]
    if bad:
        raise ValueError(f"invalid palette colors {bad!r}")
    return tuple(value)


@dataclass(frozen=True)
class EditorSettings:
    """
    Tunable interaction and drawing parameters. Pixel values are in
    screen space and get divided by the current scale wherever a world
    distance is needed.
    """

    handle_radius_px: float = 10.0
    close_radius_px: float = 20.0
    wheel_zoom_in: float = 1.1
    wheel_zoom_out: float = 0.9
    button_zoom_step: float = 1.2
    grid_size: float = 50.0
    control_point_radius_px: float = 6.0
    draft_point_radius_px: float = 4.0
    palette: Tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self):
        for name in (
            "handle_radius_px",
            "close_radius_px",
            "grid_size",
            "control_point_radius_px",
            "draft_point_radius_px",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.wheel_zoom_in <= 1.0:
            raise ValueError("wheel_zoom_in must be greater than 1")
        if not 0.0 < self.wheel_zoom_out < 1.0:
            raise ValueError("wheel_zoom_out must be between 0 and 1")
        if self.button_zoom_step <= 1.0:
            raise ValueError("button_zoom_step must be greater than 1")
        if not self.palette:
            raise ValueError("palette must not be empty")
        if not all(is_hex_color(c) for c in self.palette):
            raise ValueError("palette entries must be #rrggbb colors")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["palette"] = list(self.palette)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorSettings":
        """
        Builds settings from a plain dictionary, e.g. loaded from YAML.
        Unknown keys are ignored; values that cannot be used fall back
        to their defaults.
        """
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            try:
                if f.name == "palette":
                    kwargs[f.name] = _palette_from(value)
                else:
                    kwargs[f.name] = float(value)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid setting {f.name}={value!r}")
        try:
            return cls(**kwargs)
        except ValueError as e:
            logger.warning(f"Invalid editor settings ({e}), using defaults")
            return cls()


class Config:
    def __init__(self, settings: Optional[EditorSettings] = None):
        self.settings = settings or EditorSettings()
        self.changed = Signal()

    def set_settings(self, settings: EditorSettings):
        if self.settings == settings:
            return
        self.settings = settings
        self.changed.send(self)

    def to_dict(self) -> Dict[str, Any]:
        return {"editor": self.settings.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        editor = data.get("editor") or {}
        if not isinstance(editor, dict):
            logger.warning("Ignoring malformed 'editor' section")
            editor = {}
        return cls(EditorSettings.from_dict(editor))


class ConfigManager:
    def __init__(self, filepath: Path):
        self.filepath = filepath
        self.config: Config = Config()

        self.load_config()

    def save(self):
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self.filepath, "w") as f:
            yaml.safe_dump(self.config.to_dict(), f)

    def _read(self) -> Config:
        if not self.filepath.exists():
            return Config()  # Defaults

        try:
            with open(self.filepath, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read {self.filepath}: {e}")
            data = None

        if not isinstance(data, dict):
            return Config()
        return Config.from_dict(data)

    def load_config(self) -> Config:
        self.config = self._read()
        return self.config

    def reload(self) -> Config:
        """
        Re-reads the file into the existing `Config`, so that listeners
        of `Config.changed` see edits made while the app is running.
        """
        logger.info(f"Reloading configuration from {self.filepath}")
        self.config.set_settings(self._read().settings)
        return self.config
