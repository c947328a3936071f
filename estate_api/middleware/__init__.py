"""
Middleware package for the Estate Listing API.
Provides the origin allow-list and request context middleware.
"""

from .origins import OriginAllowListMiddleware
from .request import RequestContextMiddleware

__all__ = [
    "OriginAllowListMiddleware",
    "RequestContextMiddleware"
]
