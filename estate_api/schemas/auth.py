"""
Pydantic schemas for authentication requests and responses.
Handles registration and login payloads.

Request fields are optional at the schema level so that missing values reach
the service and are reported with the API's own messages.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class RegisterRequest(BaseModel):
    """Registration request schema (camelCase names as sent by the UI)."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = Field(
        None,
        description="Email address used as the login key",
        examples=["seller@example.com"]
    )
    password: Optional[str] = Field(
        None,
        description="Plain text password; only its hash is stored",
        examples=["correct horse battery staple"]
    )
    first_name: Optional[str] = Field(None, alias="firstName", examples=["Jane"])
    last_name: Optional[str] = Field(None, alias="lastName", examples=["Doe"])
    type: Optional[str] = Field(
        None,
        description="Account type: buyer or seller",
        examples=["seller"]
    )


class LoginRequest(BaseModel):
    """Login request schema."""

    email: Optional[str] = Field(None, examples=["seller@example.com"])
    password: Optional[str] = Field(None, examples=["correct horse battery staple"])


class UserData(BaseModel):
    """Public profile returned after login."""

    id: int
    first_name: str
    last_name: str
    type: str


class LoginResponse(BaseModel):
    """Login response schema."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Login successful"
    token: str = Field(..., description="Signed JWT access token")
    user_data: UserData = Field(..., alias="userData")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
