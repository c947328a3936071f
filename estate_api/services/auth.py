"""
Authentication service for registration and login.
Handles credential hashing, duplicate detection and login token issuing.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from estate_api.config import Settings
from estate_api.repositories.user import UserRepository
from estate_api.models.user import User, UserType, SELF_REGISTERABLE_TYPES
from estate_api.schemas.auth import RegisterRequest
from estate_api.utils.auth import create_access_token
from estate_api.utils.exceptions import (
    BadRequestError,
    DuplicateUserError,
    InvalidCredentialsError,
    UserNotFoundError,
)
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for user registration and login.
    """

    def __init__(self, db_session: AsyncSession, settings: Optional[Settings] = None):
        self.db = db_session
        self.settings = settings
        self.user_repo = UserRepository(db_session)

    async def register(self, registration: RegisterRequest) -> User:
        """
        Register a buyer or seller account.

        Args:
            registration: Registration form data

        Returns:
            Created user instance

        Raises:
            BadRequestError: If a field is missing, the type is not
                buyer/seller, or the email is malformed
            DuplicateUserError: If the email is already registered
        """
        fields = (
            registration.email,
            registration.password,
            registration.first_name,
            registration.last_name,
            registration.type,
        )
        if any(value is None or not value.strip() for value in fields):
            raise BadRequestError("All fields are required.")

        if registration.type not in {t.value for t in SELF_REGISTERABLE_TYPES}:
            raise BadRequestError("Invalid user type.")

        try:
            email = User.validate_email_format(registration.email)
        except ValueError:
            raise BadRequestError("Invalid email address.")

        if await self.user_repo.email_exists(email):
            logger.info(f"Registration rejected, email already registered: {email}")
            raise DuplicateUserError()

        try:
            user = await self.user_repo.create_user({
                "email": email,
                "password": registration.password,
                "first_name": registration.first_name.strip(),
                "last_name": registration.last_name.strip(),
                "type": UserType(registration.type),
            })
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise DuplicateUserError()

        logger.info(f"Registered {user.type.value} account: {user.email} (ID: {user.id})")
        return user

    async def authenticate_user(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Authenticate user with email and password.

        Raises:
            BadRequestError: If email or password is missing
            UserNotFoundError: If no account uses this email
            InvalidCredentialsError: If the password does not match
        """
        if not email or not password:
            raise BadRequestError("Email and password are required.")

        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info(f"Login for unknown email: {email}")
            raise UserNotFoundError()

        if not user.verify_password(password):
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
        """
        Authenticate user and issue a signed access token.

        Returns:
            Tuple of (user, access_token)
        """
        user = await self.authenticate_user(email, password)
        token = create_access_token(
            user_id=user.id,
            email=user.email,
            user_type=user.type.value,
            settings=self.settings,
        )
        return user, token

    async def ensure_admin(self, email: str, password: str) -> Optional[User]:
        """
        Create an administrator account unless the email is already taken.

        Returns:
            The created admin, or None if an account already existed
        """
        email = User.validate_email_format(email)
        if await self.user_repo.email_exists(email):
            logger.info("Admin was created or already exists.")
            return None

        admin = await self.user_repo.create_user({
            "email": email,
            "password": password,
            "first_name": "admin",
            "last_name": "admin",
            "type": UserType.ADMIN,
        })
        logger.info(f"Admin account created: {admin.email}")
        return admin
