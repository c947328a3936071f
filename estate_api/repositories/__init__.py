"""
Repository layer for data access operations.
"""

from estate_api.repositories.base import BaseRepository
from estate_api.repositories.property import PropertyRepository
from estate_api.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "UserRepository"
]
