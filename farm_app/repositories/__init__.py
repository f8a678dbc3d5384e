"""
Repository layer for persistence (SQLite via SQLAlchemy).
"""

from farm_app.repositories.database import SessionLocal, Base, init_database
from farm_app.repositories.barn_repository import BarnRepository
from farm_app.repositories.animal_repository import AnimalRepository
from farm_app.repositories.partition_store import PartitionStore

__all__ = [
    "SessionLocal",
    "Base",
    "init_database",
    "BarnRepository",
    "AnimalRepository",
    "PartitionStore",
]
