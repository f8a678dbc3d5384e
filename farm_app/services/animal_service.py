"""
Business logic for adding animals to and removing them from the farm.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from farm_app.config.limits import DEFAULT_BARN_CAPACITY, MAX_BALANCE_ITERATIONS
from farm_app.config.settings import Settings
from farm_app.models import Animal, Barn, Color
from farm_app.repositories.partition_store import PartitionStore
from farm_app.services.balancer import AnimalNotFoundError, Balancer

__all__ = ["AnimalService", "AnimalNotFoundError", "AnimalValidationError"]

_LOG = logging.getLogger(__name__)

# One lock per color: operations on a color run one at a time, colors run independently.
_PARTITION_LOCKS: Dict[Color, threading.Lock] = {color: threading.Lock() for color in Color}


@dataclass(slots=True)
class AnimalValidationError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class AnimalService:
    """
    Encapsulates farm membership: every add/remove is one committed unit of
    work, serialized per color, that leaves the color's barns balanced.
    """

    def __init__(self, db: Session, settings: Settings | None = None) -> None:
        self._store = PartitionStore(db)
        if settings is not None:
            barn_capacity = settings.barn_capacity
            max_iterations = settings.max_balance_iterations
        else:
            barn_capacity = DEFAULT_BARN_CAPACITY
            max_iterations = MAX_BALANCE_ITERATIONS
        self._balancer = Balancer(
            self._store,
            barn_capacity=barn_capacity,
            max_iterations=max_iterations,
        )

    def find_all(self) -> List[Animal]:
        with self._store.unit_of_work():
            return self._store.find_all_animals()

    def find_barns(self, color: Color | None = None) -> List[Barn]:
        with self._store.unit_of_work():
            if color is None:
                return self._store.find_all_barns()
            return self._store.find_barns_by_color(color)

    def delete_all(self) -> None:
        with self._store.unit_of_work():
            self._store.delete_all()
        _LOG.info("Cleared all animals and barns")

    def add_to_farm(self, animal: Animal) -> Animal:
        """
        Place a new animal and rebalance its color.

        If the unit of work fails, the animal's id and barn are reset to what
        they were before the call, so the same object can be added again.
        """
        self._validate(animal)
        original_id, original_barn_id = animal.id, animal.barn_id
        try:
            with _PARTITION_LOCKS[animal.favorite_color], self._store.unit_of_work():
                placed = self._balancer.place(animal)
        except Exception:
            animal.id = original_id
            animal.barn_id = original_barn_id
            raise
        _LOG.info("Added %s (%s) to barn %s", placed.name, placed.favorite_color.name, placed.barn_id)
        return placed

    def add_all_to_farm(self, animals: Iterable[Animal]) -> List[Animal]:
        """Add animals one at a time, in the given order, each in its own unit of work."""
        return [self.add_to_farm(animal) for animal in animals]

    def remove_from_farm(self, animal: Animal) -> None:
        """
        Remove a stored animal by id.

        Only the id of the argument is used: the color whose lock is taken
        and the barn that is cleaned up come from the stored record.
        """
        if animal.id is None:
            raise AnimalNotFoundError("Animal has no id; it was never added to the farm.")
        with self._store.unit_of_work():
            stored = self._store.get_animal(animal.id)
        if stored is None:
            raise AnimalNotFoundError(f"Animal with id {animal.id} not found.")

        # Re-read under the lock: another remove may have won the race.
        with _PARTITION_LOCKS[stored.favorite_color], self._store.unit_of_work():
            self._balancer.remove(stored)
        _LOG.info("Removed animal %s (%s)", stored.id, stored.favorite_color.name)

    def remove_all_from_farm(self, animals: Iterable[Animal]) -> None:
        for animal in animals:
            self.remove_from_farm(animal)

    def is_barns_balanced(self, color: Color) -> bool:
        with _PARTITION_LOCKS[color], self._store.unit_of_work():
            return self._balancer.is_balanced(color)

    def _validate(self, animal: Animal) -> None:
        if not animal.name or not animal.name.strip():
            raise AnimalValidationError("Animal name is required.")
        if not isinstance(animal.favorite_color, Color):
            raise AnimalValidationError("Animal favorite color must be a known Color.")
        if animal.barn_id is not None:
            raise AnimalValidationError("Animal is already assigned to a barn.")
