"""
Domain models for the farm app.

These are pure Python/domain classes, separate from ORM mappings.
"""

from farm_app.models.color import Color
from farm_app.models.barn import Barn
from farm_app.models.animal import Animal

__all__ = [
    "Color",
    "Barn",
    "Animal",
]
