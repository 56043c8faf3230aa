"""Colour constants for glyphs and message log lines.

Colours are plain RGB triples so they serialize as JSON lists and any frontend
can map them onto whatever palette it has. Names follow the libtcod palette.
"""

from typing import Tuple

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
RED: Color = (255, 0, 0)
DARK_RED: Color = (191, 0, 0)
GREEN: Color = (0, 255, 0)
LIGHT_GREEN: Color = (63, 255, 63)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
YELLOW: Color = (255, 255, 0)
LIGHT_YELLOW: Color = (255, 255, 63)
ORANGE: Color = (255, 127, 0)
DARKER_ORANGE: Color = (127, 63, 0)
VIOLET: Color = (127, 0, 255)
LIGHT_VIOLET: Color = (159, 63, 255)
LIGHT_BLUE: Color = (63, 63, 255)
LIGHT_CYAN: Color = (63, 255, 255)
SKY: Color = (0, 191, 255)
DESATURATED_FUCHSIA: Color = (127, 63, 127)
LIGHT_GREY: Color = (159, 159, 159)


def as_color(value) -> Color:
    """Coerce a deserialized list/tuple back into an RGB tuple."""
    r, g, b = value
    return (int(r), int(g), int(b))
