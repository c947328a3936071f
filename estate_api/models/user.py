"""
User model with credential hashing and account type.
Handles buyer, seller and administrator accounts.
"""

from sqlalchemy import String, DateTime, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_api.database import Base
from estate_api.utils.auth import verify_password
from email_validator import validate_email, EmailNotValidError
from datetime import datetime
import enum
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_api.models.property import Property


class UserType(str, enum.Enum):
    """Account type enumeration."""
    SELLER = "seller"
    BUYER = "buyer"
    ADMIN = "admin"


# Types a visitor may pick when registering; admins are seeded, never self-registered
SELF_REGISTERABLE_TYPES = (UserType.BUYER, UserType.SELLER)


class User(Base):
    """
    User account owning zero or more property listings.
    """

    __tablename__ = "Users"

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)

    last_name: Mapped[str] = mapped_column(String(50), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Login key, stored trimmed and lower-cased"
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hash of the user's password"
    )

    type: Mapped[UserType] = mapped_column(
        SQLEnum(
            UserType,
            name="user_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=UserType.SELLER,
        server_default=UserType.SELLER.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, type={self.type})>"

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email syntax using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email.strip(), check_deliverability=False)
            return cls.normalize_email(valid_email.normalized)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    def verify_password(self, password: str) -> bool:
        """Check a plain text password against the stored hash."""
        return verify_password(password, self.password)

    @property
    def is_admin(self) -> bool:
        return self.type == UserType.ADMIN

    def to_public_dict(self) -> dict:
        """Public profile returned on login (no email or credentials)."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "type": self.type.value,
        }
