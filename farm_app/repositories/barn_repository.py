"""
Repository for barns.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, Session

from farm_app.repositories.database import Base
from farm_app.models import Barn, Color


class BarnORM(Base):
    __tablename__ = "barns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)


def _to_barn(obj: BarnORM) -> Barn:
    return Barn(
        id=obj.id,
        name=obj.name,
        color=Color[obj.color],
        capacity=obj.capacity,
    )


class BarnRepository:
    """
    Repository for barns.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def list(self) -> List[Barn]:
        return [
            _to_barn(obj)
            for obj in self._db.query(BarnORM).order_by(BarnORM.color, BarnORM.id).all()
        ]

    def list_for_color(self, color: Color) -> List[Barn]:
        return [
            _to_barn(obj)
            for obj in (
                self._db.query(BarnORM)
                .filter(BarnORM.color == color.name)
                .order_by(BarnORM.id)
                .all()
            )
        ]

    def get(self, barn_id: int) -> Optional[Barn]:
        obj = self._db.get(BarnORM, barn_id)
        if not obj:
            return None
        return _to_barn(obj)

    def create(self, barn: Barn) -> Barn:
        if barn.capacity <= 0:
            raise ValueError("Barn.capacity must be positive")
        obj = BarnORM(
            name=barn.name,
            color=barn.color.name,
            capacity=barn.capacity,
        )
        self._db.add(obj)
        self._db.flush()
        barn.id = obj.id
        return barn

    def update(self, barn: Barn) -> Barn:
        if barn.id is None:
            raise ValueError("Barn.id must be set for update")
        obj = self._db.get(BarnORM, barn.id)
        if obj is None:
            raise ValueError(f"Barn with id {barn.id} not found")
        obj.name = barn.name
        obj.color = barn.color.name
        obj.capacity = barn.capacity
        self._db.flush()
        return barn

    def delete(self, barn_id: int) -> None:
        obj = self._db.get(BarnORM, barn_id)
        if obj is None:
            return
        self._db.delete(obj)
        self._db.flush()

    def delete_all(self) -> None:
        self._db.query(BarnORM).delete()
        self._db.flush()
