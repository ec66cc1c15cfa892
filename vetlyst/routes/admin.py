"""
Vetlyst Backend — Submission Listing Route Handlers
=====================================================

What:  Read-only lists of stored appointment requests and clinic claims.
Who:   The admin appointments page and support staff.

Security Note:
    These routes are NOT authenticated. Authentication is out of scope for
    this service; put them behind the reverse proxy's basic auth (or keep
    them off the public hostname) in production.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.database import get_db_session
from vetlyst.schemas.submission import AppointmentRequestResponse, ClinicClaimResponse
from vetlyst.services.submission_service import (
    KIND_APPOINTMENT,
    KIND_CLAIM,
    submission_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin"])


@router.get(
    "/appointments",
    response_model=List[AppointmentRequestResponse],
    summary="List all appointment requests (newest first)",
)
@router.get(
    "/admin/appointments",
    response_model=List[AppointmentRequestResponse],
    include_in_schema=False,
)
async def list_appointments(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[AppointmentRequestResponse]:
    rows = await submission_service.list_submissions(db, KIND_APPOINTMENT)
    # Submissions are personal data; never cache in shared caches
    response.headers["Cache-Control"] = "no-store"
    return [AppointmentRequestResponse.model_validate(row) for row in rows]


@router.get(
    "/claims",
    response_model=List[ClinicClaimResponse],
    summary="List all clinic claims (newest first)",
)
@router.get(
    "/admin/claims",
    response_model=List[ClinicClaimResponse],
    include_in_schema=False,
)
async def list_claims(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[ClinicClaimResponse]:
    rows = await submission_service.list_submissions(db, KIND_CLAIM)
    response.headers["Cache-Control"] = "no-store"
    return [ClinicClaimResponse.model_validate(row) for row in rows]
