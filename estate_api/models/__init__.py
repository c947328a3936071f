"""
Database models for the Estate Listing API.
Includes the User and Property models.
"""

from estate_api.models.user import User, UserType, SELF_REGISTERABLE_TYPES
from estate_api.models.property import Property, DEFAULT_AGE, DEFAULT_BEDROOMS

# Export all models for easy importing
__all__ = [
    "User",
    "UserType",
    "SELF_REGISTERABLE_TYPES",
    "Property",
    "DEFAULT_AGE",
    "DEFAULT_BEDROOMS",
]
