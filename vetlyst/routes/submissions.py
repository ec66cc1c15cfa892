"""
Vetlyst Backend — Submission Route Handlers
=============================================

What:  POST /api/appointment-request and POST /api/claim-clinic.
Who:   Called by the appointment-request and claim-clinic modals.

Request Flow:
    1. FastAPI parses the camelCase JSON body (every field optional)
    2. SubmissionService validates presence and commits one 'pending' row
    3. The notification is added as a BackgroundTask
    4. The success response is returned; the email goes out afterwards

    Why BackgroundTasks for email:
        The row is already durable when we respond. Making the user wait on
        Resend would add provider latency to every form submit without
        changing the outcome, since email failure never fails the request.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.database import get_db_session
from vetlyst.schemas.common import ErrorResponse
from vetlyst.schemas.submission import (
    AppointmentRequestPayload,
    AppointmentRequestResponse,
    AppointmentSubmitResponse,
    ClaimClinicPayload,
    ClaimSubmitResponse,
)
from vetlyst.services.notification_service import (
    NotificationService,
    get_notification_service,
)
from vetlyst.services.submission_service import (
    KIND_APPOINTMENT,
    KIND_CLAIM,
    submission_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Submissions"])


@router.post(
    "/appointment-request",
    response_model=AppointmentSubmitResponse,
    responses={
        400: {"description": "Missing owner name, email or phone", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
        500: {"description": "Request could not be stored", "model": ErrorResponse},
    },
    summary="Request an appointment at a clinic",
)
async def create_appointment_request(
    payload: AppointmentRequestPayload,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    notifier: NotificationService = Depends(get_notification_service),
) -> AppointmentSubmitResponse:
    """
    Store an appointment request and notify the clinic.

    Error responses (handled by global exception handlers):
        HTTP 400: ValidationError (owner name, email or phone missing)
        HTTP 500: PersistenceError
    """
    record = await submission_service.submit(
        db, KIND_APPOINTMENT, payload.model_dump(by_alias=True)
    )
    background_tasks.add_task(notifier.notify_appointment, record)

    return AppointmentSubmitResponse(
        data=[AppointmentRequestResponse.model_validate(record)],
    )


@router.post(
    "/claim-clinic",
    response_model=ClaimSubmitResponse,
    responses={
        400: {"description": "Missing required claim fields", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
        500: {"description": "Claim could not be stored", "model": ErrorResponse},
    },
    summary="Claim a clinic listing",
)
async def create_clinic_claim(
    payload: ClaimClinicPayload,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    notifier: NotificationService = Depends(get_notification_service),
) -> ClaimSubmitResponse:
    """Store a claim, then email the admin inbox and the claimant."""
    claim = await submission_service.submit(db, KIND_CLAIM, payload.model_dump(by_alias=True))
    background_tasks.add_task(notifier.notify_claim, claim)

    return ClaimSubmitResponse(claim_id=claim.id)
