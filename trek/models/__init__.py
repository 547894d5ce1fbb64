"""Database models for Trek."""

from trek.models.base import Base
from trek.models.category import Category
from trek.models.map import Map
from trek.models.marker import Marker
from trek.models.user import User

__all__ = [
    "Base",
    "Category",
    "Map",
    "Marker",
    "User",
]
