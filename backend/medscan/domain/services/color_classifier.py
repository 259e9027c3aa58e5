"""
Pill Color Classifier

Names the dominant color of a pill photo.
"""

from typing import Any, Callable, Optional, Sequence, Tuple, Union
import logging

from ..value_objects.vision_annotations import DominantColor
from ...cross_cutting.error_handling import handle_exception


logger = logging.getLogger(__name__)

ColorRule = Callable[[float, float, float], bool]

# Checked in order, first match wins
COLOR_RULES: Tuple[Tuple[str, ColorRule], ...] = (
    ("red", lambda r, g, b: r > 200 and g < 100 and b < 100),
    ("green", lambda r, g, b: r < 100 and g > 200 and b < 100),
    ("blue", lambda r, g, b: r < 100 and g < 100 and b > 200),
    ("yellow", lambda r, g, b: r > 200 and g > 200 and b < 100),
    ("orange", lambda r, g, b: r > 200 and g > 100 and b < 100),
    ("purple", lambda r, g, b: r > 150 and g < 100 and b > 150),
    ("white", lambda r, g, b: r > 200 and g > 200 and b > 200),
    ("black", lambda r, g, b: r < 50 and g < 50 and b < 50),
    ("gray", lambda r, g, b: min(r, g, b) > 100 and max(r, g, b) - min(r, g, b) <= 30),
    ("brown", lambda r, g, b: r > 150 and g > 100 and b > 50),
    ("pink", lambda r, g, b: r > 200 and g > 150 and b > 150),
)

LIGHT_THRESHOLD = 125


def name_rgb(red: float, green: float, blue: float) -> str:
    """
    Name an RGB triple from the fixed palette.

    Falls back to "light" or "dark" by luminance when no palette rule matches.
    """
    for name, rule in COLOR_RULES:
        if rule(red, green, blue):
            return name

    luminance = DominantColor(red=red, green=green, blue=blue).luminance
    return "light" if luminance > LIGHT_THRESHOLD else "dark"


@handle_exception(default_return=None, log_level=logging.WARNING)
def classify_color(colors: Optional[Sequence[Union[DominantColor, dict, Any]]]) -> Optional[str]:
    """
    Name the most prominent color of an image.

    Args:
        colors: Dominant colors, most prominent first. Entries may be
            DominantColor objects or raw vision-service dicts.

    Returns:
        Palette name, "light"/"dark", or None for empty or malformed input
    """
    if not colors:
        return None

    dominant = colors[0]
    if isinstance(dominant, dict):
        dominant = DominantColor.from_dict(dominant)

    logger.debug(f"Dominant color RGB: {dominant.rgb}")
    return name_rgb(*dominant.rgb)
