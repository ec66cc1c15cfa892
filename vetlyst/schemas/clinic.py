"""
Vetlyst Backend — Clinic Response Schemas
===========================================

What:  Pydantic models for directory listings and clinic detail pages.
Why:   The ORM row carries import bookkeeping the frontend never needs; the
       API adds the derived `slug` and `is_featured` fields.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ClinicResponse(BaseModel):
    """
    What:  One clinic as shown in the directory grid and on its detail page.
    How:   Built with `model_validate(clinic)`; `slug` and `is_featured` are
           read from the model's computed properties.
    """

    place_id: str = Field(description="External place identifier")
    slug: str = Field(description="URL segment: cleaned name + first 8 chars of place_id")
    name: str
    clinic_type: Optional[str] = None
    site: Optional[str] = None
    phone: Optional[str] = None
    full_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    working_hours: Optional[str] = None
    about: Optional[str] = None
    photo: Optional[str] = None
    listing_tier: Optional[str] = None
    is_featured: bool = Field(description="True when listing_tier is non-empty")
    accepts_appointments: bool = False
    lead_email: Optional[str] = None

    model_config = {"from_attributes": True}
