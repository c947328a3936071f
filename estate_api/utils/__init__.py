"""
Utility modules for the Estate Listing API.
"""

from .auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
    TokenPayload
)

from .exceptions import (
    APIException,
    BadRequestError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    InternalServerError,
    InvalidCredentialsError,
    UserNotFoundError,
    DuplicateUserError,
    PropertyNotFoundError,
    NoPropertiesFoundError,
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "TokenPayload",

    # Exceptions
    "APIException",
    "BadRequestError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "InternalServerError",
    "InvalidCredentialsError",
    "UserNotFoundError",
    "DuplicateUserError",
    "PropertyNotFoundError",
    "NoPropertiesFoundError",
]
