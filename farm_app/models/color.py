from __future__ import annotations

from enum import Enum, auto


class Color(Enum):
    """Favorite colors; each barn serves exactly one."""

    BLUE = auto()
    GREEN = auto()
    ORANGE = auto()
    PINK = auto()
    PURPLE = auto()
    RED = auto()
    YELLOW = auto()
    BROWN = auto()
    BLACK = auto()
    WHITE = auto()
    GRAY = auto()
