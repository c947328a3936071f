"""
Property repository for listing storage.
Provides the owner-scoped listing query and the single-statement update.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, literal, String
from estate_api.repositories.base import BaseRepository
from estate_api.models.property import Property
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Insert a listing.

        Args:
            property_data: Column values, already coerced

        Returns:
            Created property instance
        """
        created_property = await self.create(property_data)
        logger.info(f"Created property {created_property.id} for user {created_property.user_id}")
        return created_property

    async def get_by_owner(self, user_id: int) -> List[Property]:
        """
        Get every listing owned by a user, oldest first.

        Args:
            user_id: Owner's user ID

        Returns:
            List of properties (possibly empty)
        """
        try:
            result = await self.db.execute(
                select(Property)
                .where(Property.user_id == user_id)
                .order_by(Property.id)
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to get properties for user {user_id}: {e}")
            raise

    async def get_photo_url(self, property_id: int) -> Optional[str]:
        result = await self.db.execute(
            select(Property.photo_url).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    async def update_property(
        self,
        property_id: int,
        values: Dict[str, Any],
        photo_url: Optional[str] = None
    ) -> Optional[Property]:
        """
        Overwrite a listing's fields and return the stored row.

        The photo column is only replaced when ``photo_url`` is given; the
        update and the re-read share one transaction.

        Args:
            property_id: ID of the listing
            values: Coerced column values (photo excluded)
            photo_url: Public URL of a newly stored photo, if any

        Returns:
            The refreshed property, or None if no row matched
        """
        try:
            statement = (
                update(Property)
                .where(Property.id == property_id)
                .values(
                    **values,
                    photo_url=func.coalesce(
                        literal(photo_url, type_=String(255)),
                        Property.photo_url,
                    ),
                )
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(statement)

            if result.rowcount == 0:
                await self.db.rollback()
                return None

            refreshed = await self.db.execute(
                select(Property)
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )
            property_obj = refreshed.scalar_one()

            await self.db.commit()
            logger.info(f"Updated property {property_id}")
            return property_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise
