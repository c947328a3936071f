"""
Origin allow-list middleware.
Rejects cross-origin requests from hosts that are not explicitly allowed.
"""

from typing import Callable, Iterable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging

from estate_api.services.error_handler import ErrorHandlerService
from estate_api.utils.exceptions import OriginNotAllowedError

logger = logging.getLogger(__name__)


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """
    Refuse requests whose Origin header is outside the allow-list.

    Requests without an Origin header (curl, mobile apps, same-origin
    navigation) pass through. CORS response headers are left to
    CORSMiddleware, which must wrap this middleware.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = frozenset(origin.rstrip("/") for origin in allowed_origins)

    def is_allowed(self, origin: str) -> bool:
        return origin.rstrip("/") in self.allowed_origins

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if origin and not self.is_allowed(origin):
            logger.warning(f"Rejected request from disallowed origin {origin} to {request.url.path}")
            return ErrorHandlerService.handle_api_exception(OriginNotAllowedError(origin), request)

        return await call_next(request)
