"""
Pydantic schemas for property requests and responses.
Handles multipart listing forms and serialized listings.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PropertyFormData(BaseModel):
    """
    Raw listing fields as received from a multipart form.

    Values stay as text; numeric and boolean coercion happens in the service.
    """

    location: Optional[str] = None
    age: Optional[str] = None
    floor_plan: Optional[str] = None
    bedrooms: Optional[str] = None
    additional_facilities: Optional[str] = None
    garden: Optional[str] = None
    parking: Optional[str] = None
    proximity_facilities: Optional[str] = None
    proximity_main_roads: Optional[str] = None
    tax_records: Optional[str] = None


class PropertyResponse(BaseModel):
    """Serialized property listing."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    location: Optional[str] = None
    age: Optional[str] = None
    floor_plan: Optional[str] = None
    bedrooms: Optional[int] = None
    additional_facilities: Optional[str] = None
    garden: bool = False
    parking: bool = False
    proximity_facilities: Optional[int] = None
    proximity_main_roads: Optional[int] = None
    tax_records: Optional[float] = None
    photo_url: Optional[str] = None


class PropertyCreatedResponse(BaseModel):
    """Response for a newly created listing."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Property added successfully"
    photo_path: Optional[str] = Field(None, alias="photoPath")
