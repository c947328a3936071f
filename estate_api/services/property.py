"""
Property service for listing management.
Coerces form input, coordinates photo storage and maps storage outcomes to API errors.
"""

from typing import Any, Dict, List, Optional, Tuple
from decimal import Decimal
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from estate_api.models.property import Property
from estate_api.repositories.property import PropertyRepository
from estate_api.schemas.property import PropertyFormData
from estate_api.services.upload import UploadService
from estate_api.utils.coercion import (
    clean_text,
    coerce_decimal,
    coerce_flag,
    coerce_int,
)
from estate_api.utils.exceptions import (
    BadRequestError,
    NoPropertiesFoundError,
    PropertyNotFoundError,
)
import logging

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("location", "age", "floor_plan", "additional_facilities")
INT_FIELDS = ("bedrooms", "proximity_facilities", "proximity_main_roads")
FLAG_FIELDS = ("garden", "parking")


class PropertyService:
    """
    Property service for listing CRUD with an optional photo per write.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        upload_service: UploadService,
        empty_listing_not_found: bool = True,
        delete_replaced_photos: bool = False
    ):
        self.db_session = db_session
        self.property_repo = PropertyRepository(db_session)
        self.uploads = upload_service
        self.empty_listing_not_found = empty_listing_not_found
        self.delete_replaced_photos = delete_replaced_photos

    @staticmethod
    def require_user_id(user_id: Optional[str]) -> int:
        """
        Parse a required owner ID.

        Raises:
            BadRequestError: If the ID is missing or not an integer
        """
        if user_id is None or not str(user_id).strip():
            raise BadRequestError("user_id is required")
        try:
            return int(str(user_id).strip())
        except ValueError:
            raise BadRequestError("user_id must be an integer")

    @staticmethod
    def coerce_fields(form: PropertyFormData, keep_missing: bool = False) -> Dict[str, Any]:
        """
        Convert raw form text into column values.

        Unreadable numbers become 0 (0.0 for tax records) and flags are set
        only by 1/"1"/"true". With ``keep_missing`` a field that was not sent
        at all stays None so read-time defaults still apply.
        """
        raw = form.model_dump()
        values: Dict[str, Any] = {name: clean_text(raw[name]) for name in TEXT_FIELDS}

        for name in INT_FIELDS:
            if keep_missing and raw[name] is None:
                values[name] = None
            else:
                values[name] = coerce_int(raw[name])

        for name in FLAG_FIELDS:
            values[name] = coerce_flag(raw[name])

        if keep_missing and raw["tax_records"] is None:
            values["tax_records"] = None
        else:
            values["tax_records"] = coerce_decimal(raw["tax_records"], Decimal("0.0"))

        return values

    async def create_property(
        self,
        user_id: Optional[str],
        form: PropertyFormData,
        photo: Optional[UploadFile] = None
    ) -> Tuple[Property, Optional[str]]:
        """
        Create a listing for a user.

        Args:
            user_id: Owner ID from the form
            form: Listing fields
            photo: Optional uploaded photo

        Returns:
            Tuple of (created property, photo URL or None)

        Raises:
            BadRequestError: If user_id is missing/invalid or the photo is rejected
        """
        owner_id = self.require_user_id(user_id)
        values = self.coerce_fields(form, keep_missing=True)

        photo_url = await self.uploads.store_photo(photo)
        logger.info(f"photo path: {photo_url}")

        try:
            property_obj = await self.property_repo.create_property({
                **values,
                "user_id": owner_id,
                "photo_url": photo_url,
            })
        except Exception:
            # Nothing references the new file if the row was never written
            self.uploads.discard(photo_url)
            raise

        return property_obj, photo_url

    async def list_properties(self, user_id: Optional[str]) -> List[Dict[str, Any]]:
        """
        List a user's listings with read-time defaults applied.

        Raises:
            BadRequestError: If user_id is missing/invalid
            NoPropertiesFoundError: If the user has no listings and the
                legacy not-found behaviour is enabled
        """
        owner_id = self.require_user_id(user_id)
        logger.info(f"Received request to fetch properties for userId: {owner_id}")

        properties = await self.property_repo.get_by_owner(owner_id)

        if not properties:
            logger.info(f"No properties found for userId: {owner_id}")
            if self.empty_listing_not_found:
                raise NoPropertiesFoundError()
            return []

        return [prop.to_dict(apply_read_defaults=True) for prop in properties]

    async def update_property(
        self,
        property_id: int,
        form: PropertyFormData,
        photo: Optional[UploadFile] = None
    ) -> Property:
        """
        Overwrite a listing's fields, replacing the photo only when one is sent.

        Returns:
            The listing as stored after the update

        Raises:
            PropertyNotFoundError: If no listing has this ID
        """
        values = self.coerce_fields(form)
        logger.debug(f"Coerced update values for property {property_id}: {values}")

        new_photo_url = await self.uploads.store_photo(photo)

        previous_photo_url = None
        if new_photo_url and self.delete_replaced_photos:
            previous_photo_url = await self.property_repo.get_photo_url(property_id)

        try:
            property_obj = await self.property_repo.update_property(
                property_id, values, photo_url=new_photo_url
            )
        except Exception:
            self.uploads.discard(new_photo_url)
            raise

        if property_obj is None:
            self.uploads.discard(new_photo_url)
            raise PropertyNotFoundError()

        if previous_photo_url and previous_photo_url != new_photo_url:
            self.uploads.discard(previous_photo_url)

        return property_obj

    async def delete_property(self, property_id: int) -> None:
        """
        Delete a listing.

        Raises:
            PropertyNotFoundError: If no listing has this ID
        """
        deleted = await self.property_repo.delete(property_id)
        if deleted is None:
            raise PropertyNotFoundError()

        logger.info(f"Deleted property {property_id}")
        if self.delete_replaced_photos:
            self.uploads.discard(deleted.photo_url)
