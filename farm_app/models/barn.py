"""
Barn model.

A barn houses animals of a single color, up to a fixed head count.
"""

from __future__ import annotations

from dataclasses import dataclass

from farm_app.config.limits import BARN_NAME_PREFIX, DEFAULT_BARN_CAPACITY
from farm_app.models.color import Color


@dataclass(slots=True)
class Barn:
    """A barn serving one color partition."""

    id: int | None = None
    name: str = ""  # e.g. Barn - RED
    color: Color = Color.RED
    capacity: int = DEFAULT_BARN_CAPACITY  # max head count

    @classmethod
    def for_color(cls, color: Color, capacity: int = DEFAULT_BARN_CAPACITY) -> "Barn":
        return cls(name=f"{BARN_NAME_PREFIX}{color.name}", color=color, capacity=capacity)
