#!/usr/bin/env python3
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ColorOption:
    name: str
    value: Optional[str]


PREDEFINED_COLORS: List[ColorOption] = [
    ColorOption("Red", "#ff0000"),
    ColorOption("Blue", "#0066ff"),
    ColorOption("Green", "#00aa00"),
    ColorOption("Purple", "#8b00ff"),
    ColorOption("Orange", "#ff6600"),
    ColorOption("Pink", "#ff00aa"),
    ColorOption("Restore", None),
]


def find_color_by_name(name: str) -> Optional[ColorOption]:
    wanted = (name or "").strip().lower()
    for option in PREDEFINED_COLORS:
        if option.name.lower() == wanted:
            return option
    return None


def resolve_color(value: Optional[str]) -> Optional[str]:
    """Palette name -> hex value; anything else is passed through as a CSS colour.

    None, empty strings and "restore" all mean: reset to the page's own colours.
    """
    if value is None or not str(value).strip():
        return None
    option = find_color_by_name(str(value))
    if option is not None:
        return option.value
    return str(value).strip()
