"""
Color recognition for variable values.

Understands hex (`#fff`, `#ffffff`), `rgb()`/`rgba()` and the CSS3
color keywords (via webcolors). Anything else is not a color.
"""

import re
from dataclasses import dataclass
from typing import Optional

import webcolors


_RGB_FUNCTION = re.compile(
    r'^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*(\d*\.?\d+)\s*)?\)$',
    re.IGNORECASE,
)
_HEX = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int
    alpha: float = 1.0

    def __str__(self) -> str:
        if self.alpha < 1:
            return f"rgba({self.red}, {self.green}, {self.blue}, {self.alpha:g})"
        return f"rgb({self.red}, {self.green}, {self.blue})"


def parse_color(value: Optional[str]) -> Optional[Color]:
    """Color for a variable value, or None if it is not a plain color."""
    if not value:
        return None
    value = value.strip()

    if _HEX.match(value):
        rgb = webcolors.hex_to_rgb(webcolors.normalize_hex(value))
        return Color(rgb.red, rgb.green, rgb.blue)

    match = _RGB_FUNCTION.match(value)
    if match:
        red, green, blue = (int(match.group(i)) for i in (1, 2, 3))
        if max(red, green, blue) > 255:
            return None
        if match.group(4) is None:
            return Color(red, green, blue)
        alpha = float(match.group(4))
        if alpha > 1:
            return None
        return Color(red, green, blue, alpha)

    try:
        rgb = webcolors.name_to_rgb(value.lower())
    except ValueError:
        return None
    return Color(rgb.red, rgb.green, rgb.blue)
