"""
Partition store: the read/write surface the balancer needs over animals and barns.

Every write is flushed to the database at once so later reads in the same
session see it. Nothing is committed until the enclosing unit of work ends.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from farm_app.models import Animal, Barn, Color
from farm_app.repositories.animal_repository import AnimalRepository
from farm_app.repositories.barn_repository import BarnRepository


class PartitionStore:
    """Color-partitioned access to animals and barns over one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._animal_repo = AnimalRepository(db)
        self._barn_repo = BarnRepository(db)

    @contextmanager
    def unit_of_work(self) -> Iterator["PartitionStore"]:
        """
        Commit everything written inside the block, or roll all of it back.

        Exceptions are re-raised after the rollback.
        """
        try:
            yield self
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

    def find_all_animals(self) -> List[Animal]:
        return self._animal_repo.list()

    def find_all_barns(self) -> List[Barn]:
        return self._barn_repo.list()

    def find_barns_by_color(self, color: Color) -> List[Barn]:
        return self._barn_repo.list_for_color(color)

    def find_animals_by_color(self, color: Color) -> List[Animal]:
        return self._animal_repo.list_for_color(color)

    def find_animals_by_barn(self, barn: Barn) -> List[Animal]:
        if barn.id is None:
            return []
        return self._animal_repo.list_for_barn(barn.id)

    def find_first_animal_by_barn(self, barn: Barn) -> Optional[Animal]:
        if barn.id is None:
            return None
        return self._animal_repo.first_for_barn(barn.id)

    def get_animal(self, animal_id: int) -> Optional[Animal]:
        return self._animal_repo.get(animal_id)

    def get_barn(self, barn_id: int) -> Optional[Barn]:
        return self._barn_repo.get(barn_id)

    def save_barn(self, barn: Barn) -> Barn:
        if barn.id is None:
            return self._barn_repo.create(barn)
        return self._barn_repo.update(barn)

    def delete_barn(self, barn: Barn) -> None:
        if barn.id is not None:
            self._barn_repo.delete(barn.id)

    def save_animal(self, animal: Animal) -> Animal:
        if animal.id is None:
            return self._animal_repo.create(animal)
        return self._animal_repo.update(animal)

    def delete_animal(self, animal: Animal) -> None:
        if animal.id is not None:
            self._animal_repo.delete(animal.id)

    def delete_all(self) -> None:
        self._animal_repo.delete_all()
        self._barn_repo.delete_all()
