"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ErrorDetail(BaseModel):
    """Schema for individual field error detail."""

    field: Optional[str] = Field(None, examples=["user_id"])
    message: str = Field(..., examples=["Field required"])
    type: Optional[str] = Field(None, examples=["missing"])


class ErrorInfo(BaseModel):
    """Machine-readable part of an error response."""

    code: str = Field(..., examples=["NOT_FOUND"])
    timestamp: str = Field(..., examples=["2024-01-01T00:00:00Z"])
    request_id: Optional[str] = Field(None, examples=["abc12345"])
    details: Optional[List[ErrorDetail]] = None


class APIErrorResponse(BaseModel):
    """Schema for every non-2xx JSON response."""

    message: str = Field(..., examples=["Property not found."])
    error: ErrorInfo


_DESCRIPTIONS = {
    400: "Bad Request - missing or invalid input",
    401: "Unauthorized - wrong password",
    403: "Forbidden - origin not allowed",
    404: "Not Found",
    500: "Internal server error",
}


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Build the ``responses=`` mapping for a route's documented error statuses."""
    return {
        code: {"description": _DESCRIPTIONS.get(code, "Error"), "model": APIErrorResponse}
        for code in status_codes
    }
