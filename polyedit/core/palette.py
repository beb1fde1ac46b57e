import logging
import re
from typing import Any, Sequence, Tuple

logger = logging.getLogger(__name__)

# A fully resolved, render-ready RGBA color.
ColorRGBA = Tuple[float, float, float, float]

DEFAULT_PALETTE: Tuple[str, ...] = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
)

_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.fullmatch(value))


def color_for_index(
    index: int, palette: Sequence[str] = DEFAULT_PALETTE
) -> str:
    """
    Returns the palette entry for the n-th created polygon. Colors repeat
    once the palette is exhausted.
    """
    return palette[index % len(palette)]


def hex_to_rgba(value: str, alpha: float = 1.0) -> ColorRGBA:
    """
    Converts a '#rrggbb' string into an RGBA tuple with components in
    the range 0..1. Returns opaque magenta for malformed input.
    """
    digits = value.lstrip("#")
    if len(digits) != 6:
        logger.warning(f"Invalid color '{value}', using default.")
        return 1.0, 0.0, 1.0, alpha
    try:
        r, g, b = (int(digits[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError:
        logger.warning(f"Invalid color '{value}', using default.")
        return 1.0, 0.0, 1.0, alpha
    return r, g, b, alpha
