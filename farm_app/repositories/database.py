"""
SQLAlchemy database setup for the farm app.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    """Base declarative class for ORM models."""

    pass


# Will be assigned a sessionmaker instance by init_database at startup
SessionLocal: sessionmaker | None = None


def get_db() -> Generator:
    """Provide a SQLAlchemy session."""
    if SessionLocal is None:
        raise RuntimeError("SessionLocal is not initialized")
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_farm_engine(db_path: Path) -> Engine:
    """
    Create a SQLite engine whose transactions take the write lock up front.

    pysqlite defers BEGIN until the first write, so two sessions reading and
    then writing can deadlock on the lock upgrade. BEGIN IMMEDIATE makes a
    unit of work wait for the lock instead, for up to `timeout` seconds.
    """
    engine = create_engine(
        f"sqlite:///{db_path}",
        future=True,
        echo=False,
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(db_path: Path) -> sessionmaker:
    """
    Initialize the SQLite database, create tables, and configure SessionLocal.

    This must be called once at startup (done in init_farm.py).
    """
    # Import ORM models so their metadata is registered on Base
    from farm_app.repositories.barn_repository import BarnORM  # noqa: F401
    from farm_app.repositories.animal_repository import AnimalORM  # noqa: F401

    engine = create_farm_engine(db_path)
    Base.metadata.create_all(bind=engine)

    global SessionLocal
    SessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        future=True,
    )
    return SessionLocal
