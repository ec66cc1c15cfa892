"""
Vetlyst Backend — Submission SQLAlchemy Models
================================================

What:  ORM models for the `appointment_requests` and `clinic_claims` tables.
Why:   Every form a pet owner or clinic staff member submits becomes one
       durable row. The row is the source of truth for the request; email
       notifications are only a best-effort echo of it.
Who:   Inserted by SubmissionService; listed by the admin routes.

Table Design Rationale:
    - UUID primary key: Server-assigned, non-sequential (the claim id is shown
      to the claimant as a reference number).
    - clinic_name / clinic_email copied at submission time: a submission must
      stay readable even if the clinic row is later re-imported, renamed or
      removed. There is deliberately NO foreign key to `clinics`.
    - status: 'pending' on insert. Later values are set by administrative
      tooling outside this service; the workflow never updates a row.
    - No uniqueness constraint: duplicate requests for the same clinic and
      owner are allowed.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from vetlyst.database import Base

STATUS_PENDING = "pending"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppointmentRequest(Base):
    """
    A pet owner's request for an appointment at a clinic.

    Required at submission: pet_owner_name, pet_owner_email, pet_owner_phone.
    Everything else is optional and stored as NULL when blank.
    """

    __tablename__ = "appointment_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ── Clinic (denormalized) ─────────────────────────────────────────────
    clinic_place_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    clinic_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    clinic_email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Pet Owner ─────────────────────────────────────────────────────────
    pet_owner_name: Mapped[str] = mapped_column(Text, nullable=False)
    pet_owner_email: Mapped[str] = mapped_column(Text, nullable=False)
    pet_owner_phone: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Request Details ───────────────────────────────────────────────────
    pet_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pet_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Kept as the strings the form sent ("2024-03-18", "morning")
    preferred_date: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preferred_time: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=STATUS_PENDING,
        server_default=text("'pending'"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_appointment_requests_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<AppointmentRequest(id={self.id}, clinic='{self.clinic_name}', "
            f"status='{self.status}')>"
        )


class ClinicClaim(Base):
    """
    A clinic staff member's request to take over a directory listing.

    Required at submission: clinic id and name, claimant name, email and
    role, and the preferred verification method.
    """

    __tablename__ = "clinic_claims"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    clinic_place_id: Mapped[str] = mapped_column(String(255), nullable=False)
    clinic_name: Mapped[str] = mapped_column(Text, nullable=False)

    claimant_name: Mapped[str] = mapped_column(Text, nullable=False)
    claimant_email: Mapped[str] = mapped_column(Text, nullable=False)
    claimant_phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # e.g. "owner", "practice_manager", "veterinarian"
    claimant_role: Mapped[str] = mapped_column(Text, nullable=False)

    # e.g. "phone", "email", "document"
    verification_method: Mapped[str] = mapped_column(Text, nullable=False)
    verification_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=STATUS_PENDING,
        server_default=text("'pending'"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_clinic_claims_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<ClinicClaim(id={self.id}, clinic='{self.clinic_name}', status='{self.status}')>"
