"""
FastAPI dependency injection utilities for services and database sessions.
Services are configured from the settings the running app was created with.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from estate_api.config import Settings
from estate_api.database import get_db
from estate_api.services.auth import AuthService
from estate_api.services.property import PropertyService
from estate_api.services.upload import UploadService


def get_app_settings(request: Request) -> Settings:
    """Settings passed to ``create_app`` for the app serving this request."""
    return request.app.state.settings


def get_upload_service(settings: Settings = Depends(get_app_settings)) -> UploadService:
    """
    Get upload service instance.

    Args:
        settings: Application settings

    Returns:
        UploadService instance
    """
    return UploadService(settings)


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        settings: Application settings (token signing)

    Returns:
        AuthService instance
    """
    return AuthService(db, settings)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service),
    settings: Settings = Depends(get_app_settings)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session
        upload_service: Photo storage
        settings: Application settings

    Returns:
        PropertyService instance
    """
    return PropertyService(
        db,
        upload_service,
        empty_listing_not_found=settings.empty_listing_not_found,
        delete_replaced_photos=settings.delete_replaced_photos,
    )
