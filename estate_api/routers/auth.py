"""
Authentication API endpoints for registration and login.
"""

from fastapi import APIRouter, Depends, status
from estate_api.services.auth import AuthService
from estate_api.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    UserData
)
from estate_api.schemas.error import error_responses
from estate_api.utils.dependencies import get_auth_service


router = APIRouter(tags=["Authentication"])


@router.post(
    "/api/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate with email and password; returns a signed token and the public profile",
    responses=error_responses(400, 401, 404, 500)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate user and return an access token.

    Raises:
        BadRequestError: If email or password is missing
        UserNotFoundError: If no account uses this email
        InvalidCredentialsError: If the password is wrong
    """
    user, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )

    return LoginResponse(
        message="Login successful",
        token=token,
        user_data=UserData(**user.to_public_dict())
    )


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register account",
    description="Create a buyer or seller account",
    responses=error_responses(400, 500)
)
async def register(
    registration: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Register a new account. Nothing from the request is echoed back.

    Raises:
        BadRequestError: If fields are missing/invalid or the email is taken
    """
    await auth_service.register(registration)
    return MessageResponse(message="User registered successfully.")
