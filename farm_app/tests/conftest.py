"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Sequence

import pytest

# Ensure project root is on path when running tests
_project_root = Path(__file__).resolve().parents[2]
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from farm_app.config.settings import Settings
from farm_app.models import Animal, Barn, Color
from farm_app.repositories.partition_store import PartitionStore
from farm_app.services.animal_service import AnimalService


@pytest.fixture
def temp_db():
    """Create a temporary SQLite database and return its path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    try:
        path.unlink(missing_ok=True)
    except OSError:
        pass  # Windows may hold file; ignore cleanup failure


@pytest.fixture
def session_factory(temp_db):
    """Provide a sessionmaker over one engine with initialized schema."""
    from sqlalchemy.orm import sessionmaker
    from farm_app.repositories.database import Base, create_farm_engine
    from farm_app.repositories.barn_repository import BarnORM  # noqa: F401
    from farm_app.repositories.animal_repository import AnimalORM  # noqa: F401

    engine = create_farm_engine(temp_db)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """Provide a database session with initialized schema."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings(tmp_path, temp_db):
    """Settings with small barns so scenarios stay readable."""
    return Settings(project_root=tmp_path, data_dir=tmp_path, db_path=temp_db, barn_capacity=4)


@pytest.fixture
def store(db_session):
    return PartitionStore(db_session)


@pytest.fixture
def service(db_session, settings):
    return AnimalService(db_session, settings)


@pytest.fixture
def seed_partition(store) -> Callable[..., Dict[int, List[Animal]]]:
    """
    Write barns and animals straight to the store, bypassing the balancer.

    seed_partition(Color.RED, [(4, 4), (4, 1)]) builds two RED barns of
    capacity 4 holding 4 and 1 animals. Returns barn id -> its animals,
    in creation order.
    """

    def _seed(color: Color, layout: Sequence[tuple[int, int]]) -> Dict[int, List[Animal]]:
        seeded: Dict[int, List[Animal]] = {}
        with store.unit_of_work():
            for n, (capacity, head_count) in enumerate(layout, start=1):
                barn = store.save_barn(Barn(name=f"Barn {n}", color=color, capacity=capacity))
                seeded[barn.id] = [
                    store.save_animal(
                        Animal(name=f"{color.name.title()} {n}-{i}", favorite_color=color, barn_id=barn.id)
                    )
                    for i in range(head_count)
                ]
        return seeded

    return _seed


@pytest.fixture
def sample_animals():
    """Create sample Animal domain objects (not yet on the farm)."""
    return [
        Animal(name="Bessie", favorite_color=Color.RED),
        Animal(name="Clover", favorite_color=Color.RED),
        Animal(name="Wilbur", favorite_color=Color.PINK),
    ]
