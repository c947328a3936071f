"""
Property management API endpoints.
Listings are written with multipart forms carrying an optional ``photo`` file.
"""

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from typing import List, Optional

from estate_api.services.property import PropertyService
from estate_api.schemas.auth import MessageResponse
from estate_api.schemas.property import (
    PropertyFormData,
    PropertyResponse,
    PropertyCreatedResponse
)
from estate_api.schemas.error import error_responses
from estate_api.utils.dependencies import get_property_service


router = APIRouter(prefix="/api/properties", tags=["Properties"])


def property_form(
    location: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    floor_plan: Optional[str] = Form(None),
    bedrooms: Optional[str] = Form(None),
    additional_facilities: Optional[str] = Form(None),
    garden: Optional[str] = Form(None),
    parking: Optional[str] = Form(None),
    proximity_facilities: Optional[str] = Form(None),
    proximity_main_roads: Optional[str] = Form(None),
    tax_records: Optional[str] = Form(None),
) -> PropertyFormData:
    """Collect the listing fields of a multipart form as text."""
    return PropertyFormData(
        location=location,
        age=age,
        floor_plan=floor_plan,
        bedrooms=bedrooms,
        additional_facilities=additional_facilities,
        garden=garden,
        parking=parking,
        proximity_facilities=proximity_facilities,
        proximity_main_roads=proximity_main_roads,
        tax_records=tax_records,
    )


@router.post(
    "",
    response_model=PropertyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a listing for ``user_id`` with an optional photo",
    responses=error_responses(400, 500)
)
async def create_property(
    user_id: Optional[str] = Form(None),
    form: PropertyFormData = Depends(property_form),
    photo: Optional[UploadFile] = File(None),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyCreatedResponse:
    """
    Create a new property listing.

    Returns only the stored photo URL; callers re-list to see the row.
    """
    _, photo_url = await property_service.create_property(user_id, form, photo)
    return PropertyCreatedResponse(message="Property added successfully", photo_path=photo_url)


@router.get(
    "",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List a user's properties",
    description="All listings owned by ``user_id``, with default age and bedroom values filled in",
    responses=error_responses(400, 404, 500)
)
async def list_properties(
    user_id: Optional[str] = Query(None, description="Owner's user ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[dict]:
    return await property_service.list_properties(user_id)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Overwrite a listing; the stored photo is kept unless a new one is uploaded",
    responses=error_responses(400, 404, 500)
)
async def update_property(
    property_id: int = Path(..., description="Property ID"),
    form: PropertyFormData = Depends(property_form),
    photo: Optional[UploadFile] = File(None),
    property_service: PropertyService = Depends(get_property_service)
) -> dict:
    """
    Update a property listing and return the row as stored.
    """
    property_obj = await property_service.update_property(property_id, form, photo)
    return property_obj.to_dict()


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete property",
    responses=error_responses(404, 500)
)
async def delete_property(
    property_id: int = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.delete_property(property_id)
    return MessageResponse(message="Property deleted successfully.")
