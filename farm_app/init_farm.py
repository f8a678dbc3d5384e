"""
One-time initializer that populates a farm database with a sample roster.

Run from the project root with:

    python -m farm_app.init_farm

This will:
- create the SQLite database under farm_app_data/ if it does not exist,
- add the sample animals below through AnimalService (skipping names already present),
- log the resulting barn layout and balance state per color.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Tuple

from farm_app.config.settings import Settings, init_logging
from farm_app.repositories import database
from farm_app.models import Animal, Color
from farm_app.services.animal_service import AnimalService

_LOG = logging.getLogger(__name__)

SAMPLE_ANIMALS: List[Tuple[str, Color]] = [
    ("Bessie", Color.RED),
    ("Clover", Color.RED),
    ("Daisy", Color.RED),
    ("Buttercup", Color.BLUE),
    ("Wilbur", Color.PINK),
    ("Babe", Color.PINK),
    ("Shaun", Color.GREEN),
    ("Dolly", Color.GREEN),
    ("Gertrude", Color.YELLOW),
    ("Hamlet", Color.PURPLE),
]


def init_farm() -> None:
    settings = Settings.default()
    init_logging(settings)
    session_factory = database.SessionLocal or database.init_database(settings.db_path)

    with session_factory() as db:
        service = AnimalService(db, settings)
        known = {a.name for a in service.find_all()}
        service.add_all_to_farm(
            Animal(name=name, favorite_color=color)
            for name, color in SAMPLE_ANIMALS
            if name not in known
        )

        head_counts = Counter(a.barn_id for a in service.find_all())
        for color in Color:
            barns = service.find_barns(color)
            if not barns:
                continue
            layout = ", ".join(f"{b.name}#{b.id}: {head_counts[b.id]}/{b.capacity}" for b in barns)
            _LOG.info("%s -> %s (balanced=%s)", color.name, layout, service.is_barns_balanced(color))

    print("Farm initialized.")


if __name__ == "__main__":
    init_farm()
