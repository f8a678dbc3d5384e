"""
Basic settings and logging configuration for the farm app.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from farm_app.config.limits import DEFAULT_BARN_CAPACITY, MAX_BALANCE_ITERATIONS


@dataclass(slots=True)
class Settings:
    """Application-level settings."""

    project_root: Path
    data_dir: Path
    db_path: Path

    # Capacity given to every barn the balancer builds
    barn_capacity: int = DEFAULT_BARN_CAPACITY
    max_balance_iterations: int = MAX_BALANCE_ITERATIONS

    def __post_init__(self) -> None:
        if self.barn_capacity <= 0:
            raise ValueError("barn_capacity must be a positive integer")
        if self.max_balance_iterations <= 0:
            raise ValueError("max_balance_iterations must be a positive integer")

    @classmethod
    def default(cls) -> "Settings":
        """Create default settings based on the current file location."""
        project_root = Path(__file__).resolve().parents[2]
        data_dir = project_root / "farm_app_data"
        data_dir.mkdir(exist_ok=True)
        db_path = data_dir / "farm.db"
        return cls(project_root=project_root, data_dir=data_dir, db_path=db_path)


def init_logging(settings: Settings) -> None:
    """Configure basic logging to console and the data directory log file."""
    log_file = settings.data_dir / "farm.log"

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )

    logging.getLogger(__name__).info("Logging initialized. DB at %s", settings.db_path)
