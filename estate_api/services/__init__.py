"""
Service layer for business logic implementation.
Contains services for authentication, property management, uploads and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .upload import UploadService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "UploadService",
    "ErrorHandlerService"
]
