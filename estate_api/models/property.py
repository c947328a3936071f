"""
Property model for real-estate listings.
Each listing belongs to exactly one user and may reference an uploaded photo.
"""

from sqlalchemy import String, Integer, Numeric, Boolean, ForeignKey, Index, false
from sqlalchemy.orm import Mapped, mapped_column, relationship
from estate_api.database import Base
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from estate_api.models.user import User


# Values substituted at read time for listings saved without them
DEFAULT_AGE = "1"
DEFAULT_BEDROOMS = 1


class Property(Base):
    """
    Property listing owned by a user.
    Numeric fields are nullable; defaults for age and bedrooms are applied when listing.
    """

    __tablename__ = "Properties"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("Users.id", ondelete="CASCADE"),
        nullable=False,
        comment="ID of the user who owns this listing"
    )

    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    age: Mapped[Optional[str]] = mapped_column(
        String(10),
        nullable=True,
        comment="Age category of the building, stored as text"
    )

    floor_plan: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    additional_facilities: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    garden: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    parking: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    proximity_facilities: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    proximity_main_roads: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    tax_records: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=True,
    )

    photo_url: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Public URL of the uploaded photo"
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, user_id={self.user_id}, location={self.location})>"

    def to_dict(self, apply_read_defaults: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            apply_read_defaults: Substitute the default age and bedroom count
                when they were never stored

        Returns:
            Dictionary representation of property
        """
        age = self.age
        bedrooms = self.bedrooms
        if apply_read_defaults:
            age = age or DEFAULT_AGE
            bedrooms = DEFAULT_BEDROOMS if bedrooms is None else bedrooms

        return {
            "id": self.id,
            "user_id": self.user_id,
            "location": self.location,
            "age": age,
            "floor_plan": self.floor_plan,
            "bedrooms": bedrooms,
            "additional_facilities": self.additional_facilities,
            "garden": bool(self.garden),
            "parking": bool(self.parking),
            "proximity_facilities": self.proximity_facilities,
            "proximity_main_roads": self.proximity_main_roads,
            "tax_records": float(self.tax_records) if self.tax_records is not None else None,
            "photo_url": self.photo_url,
        }


# Listing lookups are always by owner
owner_index = Index("idx_properties_user_id", Property.user_id)
