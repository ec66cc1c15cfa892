"""
Vetlyst Backend — Submission Request/Response Schemas
=======================================================

What:  Pydantic models for the appointment-request and claim-clinic forms.
Why:   The frontend posts camelCase JSON; the database and admin views use
       snake_case. These models sit on that boundary.

Design Decision:
    Every request field is Optional[str]. Missing required fields must come
    back as our own 400 `validation_error` naming the fields, not as
    FastAPI's generic 422, so presence checking happens in SubmissionService.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _FormPayload(BaseModel):
    """Shared config: camelCase on the wire, numbers accepted as strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the forms send
# ══════════════════════════════════════════════════════════════════════════


class AppointmentRequestPayload(_FormPayload):
    """Body of POST /api/appointment-request."""

    clinic_id: Optional[str] = Field(default=None, description="Clinic place id")
    clinic_name: Optional[str] = None
    clinic_email: Optional[str] = Field(
        default=None,
        description="Where the notification goes; copied onto the stored request",
    )
    pet_owner_name: Optional[str] = Field(default=None, description="Required")
    pet_owner_email: Optional[str] = Field(default=None, description="Required")
    pet_owner_phone: Optional[str] = Field(default=None, description="Required")
    pet_name: Optional[str] = None
    pet_type: Optional[str] = Field(default=None, description="dog, cat, bird, ...")
    preferred_date: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    preferred_time: Optional[str] = Field(
        default=None, description="morning, afternoon, evening, or free text"
    )
    message: Optional[str] = None


class ClaimClinicPayload(_FormPayload):
    """Body of POST /api/claim-clinic."""

    clinic_id: Optional[str] = Field(default=None, description="Required")
    clinic_name: Optional[str] = Field(default=None, description="Required")
    claimant_name: Optional[str] = Field(default=None, description="Required")
    claimant_email: Optional[str] = Field(default=None, description="Required")
    claimant_phone: Optional[str] = None
    claimant_role: Optional[str] = Field(default=None, description="Required")
    verification_method: Optional[str] = Field(default=None, description="Required")
    verification_notes: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models: stored rows as returned to clients
# ══════════════════════════════════════════════════════════════════════════


class AppointmentRequestResponse(BaseModel):
    """One stored appointment request. Used in submit and admin list responses."""

    id: uuid.UUID
    clinic_place_id: Optional[str] = None
    clinic_name: Optional[str] = None
    clinic_email: Optional[str] = None
    pet_owner_name: str
    pet_owner_email: str
    pet_owner_phone: str
    pet_name: Optional[str] = None
    pet_type: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    message: Optional[str] = None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ClinicClaimResponse(BaseModel):
    """One stored clinic claim."""

    id: uuid.UUID
    clinic_place_id: str
    clinic_name: str
    claimant_name: str
    claimant_email: str
    claimant_phone: Optional[str] = None
    claimant_role: str
    verification_method: str
    verification_notes: Optional[str] = None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AppointmentSubmitResponse(BaseModel):
    """
    What:  Response after an appointment request is stored.
    Why `data` is a list: the frontend was written against an insert-and-select
           call that returns the inserted rows as an array.
    """

    success: bool = True
    message: str = "Appointment request submitted successfully"
    data: List[AppointmentRequestResponse]


class ClaimSubmitResponse(BaseModel):
    """Response after a claim is stored. `claimId` is the claimant's reference."""

    success: bool = True
    claim_id: uuid.UUID = Field(serialization_alias="claimId")
