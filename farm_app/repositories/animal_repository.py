"""
Repository for animals.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, Session

from farm_app.repositories.database import Base
from farm_app.models import Animal, Color


class AnimalORM(Base):
    __tablename__ = "animals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    favorite_color: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    barn_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("barns.id"), nullable=True, index=True
    )


def _to_animal(obj: AnimalORM) -> Animal:
    return Animal(
        id=obj.id,
        name=obj.name,
        favorite_color=Color[obj.favorite_color],
        barn_id=obj.barn_id,
    )


class AnimalRepository:
    """
    Repository for animals.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def list(self) -> List[Animal]:
        return [_to_animal(obj) for obj in self._db.query(AnimalORM).order_by(AnimalORM.id).all()]

    def list_for_color(self, color: Color) -> List[Animal]:
        return [
            _to_animal(obj)
            for obj in (
                self._db.query(AnimalORM)
                .filter(AnimalORM.favorite_color == color.name)
                .order_by(AnimalORM.id)
                .all()
            )
        ]

    def list_for_barn(self, barn_id: int) -> List[Animal]:
        return [
            _to_animal(obj)
            for obj in (
                self._db.query(AnimalORM)
                .filter(AnimalORM.barn_id == barn_id)
                .order_by(AnimalORM.id)
                .all()
            )
        ]

    def first_for_barn(self, barn_id: int) -> Optional[Animal]:
        obj = (
            self._db.query(AnimalORM)
            .filter(AnimalORM.barn_id == barn_id)
            .order_by(AnimalORM.id)
            .first()
        )
        if obj is None:
            return None
        return _to_animal(obj)

    def get(self, animal_id: int) -> Optional[Animal]:
        obj = self._db.get(AnimalORM, animal_id)
        if not obj:
            return None
        return _to_animal(obj)

    def create(self, animal: Animal) -> Animal:
        obj = AnimalORM(
            name=animal.name,
            favorite_color=animal.favorite_color.name,
            barn_id=animal.barn_id,
        )
        self._db.add(obj)
        self._db.flush()
        animal.id = obj.id
        return animal

    def update(self, animal: Animal) -> Animal:
        if animal.id is None:
            raise ValueError("Animal.id must be set for update")
        obj = self._db.get(AnimalORM, animal.id)
        if obj is None:
            raise ValueError(f"Animal with id {animal.id} not found")
        obj.name = animal.name
        obj.favorite_color = animal.favorite_color.name
        obj.barn_id = animal.barn_id
        self._db.flush()
        return animal

    def delete(self, animal_id: int) -> None:
        obj = self._db.get(AnimalORM, animal_id)
        if obj is None:
            return
        self._db.delete(obj)
        self._db.flush()

    def delete_all(self) -> None:
        self._db.query(AnimalORM).delete()
        self._db.flush()
