"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    UserData,
    MessageResponse
)

# Property schemas
from .property import (
    PropertyFormData,
    PropertyResponse,
    PropertyCreatedResponse
)

# Error schemas
from .error import APIErrorResponse, error_responses

__all__ = [
    # Authentication
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "UserData",
    "MessageResponse",

    # Property
    "PropertyFormData",
    "PropertyResponse",
    "PropertyCreatedResponse",

    # Errors
    "APIErrorResponse",
    "error_responses",
]
