from __future__ import annotations

from dataclasses import dataclass

from farm_app.models.color import Color


@dataclass(slots=True)
class Animal:
    id: int | None = None
    name: str = ""
    favorite_color: Color = Color.RED

    # Owning barn; None until the balancer places the animal
    barn_id: int | None = None
