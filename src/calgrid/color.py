# SPDX-License-Identifier: MIT

from typing import Optional

from rich.color import Color, ColorParseError

DEFAULT_EVENT_COLOR = "white"

TODAY_STYLE = "bold black on bright_cyan"
OUT_OF_MONTH_STYLE = "bright_black"
MORE_STYLE = "dim"
BAND_CONTINUATION_STYLE = "bright_black"
HAS_EVENTS_STYLE = "bold underline"
WEEK_NUMBER_STYLE = "dim cyan"


def event_color(color: Optional[str]) -> str:
    """Return a rich color for an occurrence, falling back when unparseable."""
    if color is None:
        return DEFAULT_EVENT_COLOR
    try:
        Color.parse(color)
    except ColorParseError:
        return DEFAULT_EVENT_COLOR
    return color
