"""
User repository for registration and login lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from estate_api.repositories.base import BaseRepository
from estate_api.models.user import User, UserType
from estate_api.utils.auth import hash_password
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Passwords are hashed here so plain text never reaches a model instance.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password, first_name, last_name
                      Optional: type (defaults to seller)

        Returns:
            Created user instance
        """
        data = dict(user_data)
        password = data.pop("password")

        create_data = {
            **data,
            "email": User.normalize_email(data["email"]),
            "password": hash_password(password),
            "type": data.get("type", UserType.SELLER),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: User's email address (normalized before lookup)

        Returns:
            User instance or None if not found
        """
        try:
            result = await self.db.execute(
                select(User).where(User.email == User.normalize_email(email))
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def email_exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None
