"""
Request context middleware.
Assigns request IDs, enforces a body size ceiling and a per-request timeout,
turns unhandled errors into the generic 500 response, and logs requests when
detailed logging is on.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import asyncio
import logging
import time
import uuid

from estate_api.services.error_handler import ErrorHandlerService
from estate_api.utils.exceptions import BadRequestError, RequestTimeoutError

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware wrapping every request with an ID, size check and timeout.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 12 * 1024 * 1024,  # 12MB
        timeout_seconds: float = 30.0,
        enable_request_logging: bool = False
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.timeout_seconds = timeout_seconds
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request through the context middleware.

        Args:
            request: FastAPI request object
            call_next: Next middleware/handler in chain

        Returns:
            Response object
        """
        # Generate request ID for tracking
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        try:
            self._validate_request_size(request)
        except BadRequestError as exc:
            return ErrorHandlerService.handle_api_exception(exc, request)

        if self.enable_request_logging:
            logger.info(f"Request [{request_id}]: {request.method} {request.url.path}")

        try:
            response = await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(
                f"Request [{request_id}] timed out after {self.timeout_seconds}s: "
                f"{request.method} {request.url.path}"
            )
            return ErrorHandlerService.handle_api_exception(
                RequestTimeoutError(self.timeout_seconds), request
            )
        except Exception as exc:
            # Answered here so the error response still passes through CORSMiddleware
            response = ErrorHandlerService.handle_unexpected_error(exc, request)

        if self.enable_request_logging:
            processing_time = time.time() - start_time
            logger.info(
                f"Response [{request_id}]: {response.status_code} in {processing_time:.3f}s"
            )

        # Add request ID to response headers
        response.headers["X-Request-ID"] = request_id
        return response

    def _validate_request_size(self, request: Request) -> None:
        """
        Validate request content length.

        Raises:
            BadRequestError: If request size exceeds limit
        """
        content_length = request.headers.get("content-length")
        if not content_length:
            return
        try:
            size = int(content_length)
        except ValueError:
            raise BadRequestError("Invalid content-length header")
        if size > self.max_request_size:
            raise BadRequestError(
                f"Request size {size} bytes exceeds maximum allowed size {self.max_request_size} bytes"
            )
