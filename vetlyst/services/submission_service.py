"""
Vetlyst Backend — Submission Service (Workflow Orchestrator)
==============================================================

What:  Validates and persists appointment requests and clinic claims.
Why:   Both forms share one lifecycle; keeping it in one place keeps the
       failure semantics identical for both.
How:   Presence-check the required fields for the kind, insert one row with
       status 'pending', commit, return the row.
Who:   Called by the submission and admin route handlers.

Workflow (per submission):
    ┌────────────┐    ┌─────────────┐    ┌────────────────────┐    ┌──────┐
    │  Received  │───▶│  Persisted  │───▶│  Notifying         │───▶│ Done │
    │ (validate) │    │  (pending)  │    │  (best-effort,     │    └──────┘
    └────────────┘    └─────────────┘    │  NotificationSvc)  │
                                         └────────────────────┘
    Step 1 fails → ValidationError (400), nothing written
    Step 2 fails → PersistenceError (500), rolled back, not retried
    Step 3 fails → logged only; the caller already has its success response

    submit() covers steps 1 and 2 and returns only after COMMIT, so the
    caller can schedule notification knowing the row is durable.
"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.exceptions import PersistenceError, ValidationError, VetlystError
from vetlyst.models.submission import STATUS_PENDING, AppointmentRequest, ClinicClaim

logger = logging.getLogger(__name__)

KIND_APPOINTMENT = "appointment"
KIND_CLAIM = "claim"

Submission = Union[AppointmentRequest, ClinicClaim]


class _FormSpec:
    """How one kind of form maps onto its table."""

    def __init__(
        self,
        model: Type[Submission],
        required: Tuple[str, ...],
        columns: Dict[str, str],
    ):
        self.model = model
        self.required = required
        self.columns = columns


FORMS: Dict[str, _FormSpec] = {
    KIND_APPOINTMENT: _FormSpec(
        model=AppointmentRequest,
        required=("petOwnerName", "petOwnerEmail", "petOwnerPhone"),
        columns={
            "clinicId": "clinic_place_id",
            "clinicName": "clinic_name",
            "clinicEmail": "clinic_email",
            "petOwnerName": "pet_owner_name",
            "petOwnerEmail": "pet_owner_email",
            "petOwnerPhone": "pet_owner_phone",
            "petName": "pet_name",
            "petType": "pet_type",
            "preferredDate": "preferred_date",
            "preferredTime": "preferred_time",
            "message": "message",
        },
    ),
    KIND_CLAIM: _FormSpec(
        model=ClinicClaim,
        required=(
            "clinicId",
            "clinicName",
            "claimantName",
            "claimantEmail",
            "claimantRole",
            "verificationMethod",
        ),
        columns={
            "clinicId": "clinic_place_id",
            "clinicName": "clinic_name",
            "claimantName": "claimant_name",
            "claimantEmail": "claimant_email",
            "claimantPhone": "claimant_phone",
            "claimantRole": "claimant_role",
            "verificationMethod": "verification_method",
            "verificationNotes": "verification_notes",
        },
    ),
}


def _clean(value: Optional[object]) -> Optional[str]:
    """Blank and whitespace-only values are treated as absent."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class SubmissionService:
    """
    Stateless: receives the db session per call, holds no per-request state.

    Validation is presence-only. Email and phone syntax are NOT checked;
    that gap is known and accepted for the public forms.
    """

    def _form(self, kind: str) -> _FormSpec:
        form = FORMS.get(kind)
        if form is None:
            raise ValidationError(
                message=f"Unknown submission kind '{kind}'",
                context={"kind": kind, "allowed": sorted(FORMS)},
            )
        return form

    def validate(self, kind: str, fields: Mapping[str, Optional[object]]) -> Dict[str, Optional[str]]:
        """
        Presence-check the required fields for `kind`.

        Returns:
            Column name → cleaned value for every known field of the form.

        Raises:
            ValidationError listing every missing field (camelCase, as sent).
        """
        form = self._form(kind)
        values = {key: _clean(fields.get(key)) for key in form.columns}

        missing = [key for key in form.required if values[key] is None]
        if missing:
            raise ValidationError(
                message=f"Missing required fields: {', '.join(missing)}",
                fields=missing,
                context={"kind": kind},
            )

        return {form.columns[key]: value for key, value in values.items()}

    async def submit(
        self,
        db: AsyncSession,
        kind: str,
        fields: Mapping[str, Optional[object]],
    ) -> Submission:
        """
        Validate, insert, and commit one submission.

        Args:
            db: Async database session
            kind: 'appointment' or 'claim'
            fields: Flat camelCase form fields

        Returns:
            The committed row (status 'pending', id and created_at assigned).

        Raises:
            ValidationError: required field missing or blank (→ 400)
            PersistenceError: insert or commit failed (→ 500)
        """
        columns = self.validate(kind, fields)
        form = self._form(kind)

        record = form.model(**columns, status=STATUS_PENDING)
        try:
            db.add(record)
            await db.commit()
        except Exception as e:
            logger.error(
                "Failed to persist %s submission: %s", kind, str(e), exc_info=True
            )
            try:
                await db.rollback()
            except Exception:
                logger.error("Rollback after failed %s insert also failed", kind)
            raise PersistenceError(
                message="We couldn't save your request. Please try again.",
                context={"kind": kind, "error_type": type(e).__name__},
            ) from e

        logger.info(
            "%s submission %s stored (clinic=%s, status=%s)",
            kind,
            record.id,
            record.clinic_place_id,
            record.status,
        )
        return record

    async def list_submissions(self, db: AsyncSession, kind: str) -> List[Submission]:
        """
        All rows of one kind, newest first. No pagination.

        Reflects rows committed at query time; nothing more is promised.
        """
        form = self._form(kind)
        try:
            result = await db.execute(
                select(form.model).order_by(form.model.created_at.desc())
            )
            return list(result.scalars().all())
        except VetlystError:
            raise
        except Exception as e:
            logger.error("Database error listing %s submissions: %s", kind, str(e), exc_info=True)
            raise PersistenceError(
                message="Could not retrieve submissions. Please try again.",
                context={"kind": kind, "error_type": type(e).__name__},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
submission_service = SubmissionService()
