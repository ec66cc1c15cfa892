"""
Vetlyst Backend — Clinic SQLAlchemy Model
===========================================

What:  ORM model representing the `clinics` table.
Why:   Maps imported directory rows to Python objects for listing, filtering
       and slug resolution.
Who:   Read by ClinicService; written only by the import CLI.

Table Design Rationale:
    - place_id: External identifier from the data provider. This is the
      clinic's identity; the integer `id` is only a surrogate key.
    - clinic_name: Display name. Exposed as `name` in the API.
    - listing_tier: Non-empty string means the clinic has the featured/paid
      presentation. No enum; the tier names come from the import sheet.
    - created_at: Import time. Used as the stable tie-break when a slug's
      short id prefixes more than one place id.

    The slug is never stored. It is recomputed from (clinic_name, place_id)
    on every render and every incoming request.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from vetlyst.database import Base


class Clinic(Base):
    """
    A veterinary clinic listed in the directory.

    Lifecycle:
        1. Inserted by `vetlyst import-clinics`
        2. Updated by re-import (matched on place_id) or `vetlyst import-tiers`
        3. Never deleted by end-user action
    """

    __tablename__ = "clinics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    place_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="External place identifier; the clinic's true identity",
    )

    name: Mapped[str] = mapped_column("clinic_name", Text, nullable=False)
    clinic_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Contact & Address ─────────────────────────────────────────────────
    site: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    full_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    zip: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Geography & Reputation ────────────────────────────────────────────
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reviews: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # ── Presentation ──────────────────────────────────────────────────────
    # Free text, e.g. "Monday: 8AM-6PM | Tuesday: ..."; not parsed server-side
    working_hours: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    about: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Listing Capabilities ──────────────────────────────────────────────
    listing_tier: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lead_email: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Where appointment request notifications are sent",
    )
    accepts_appointments: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_clinics_city", "city"),
    )

    @property
    def is_featured(self) -> bool:
        """A non-empty listing tier grants the featured presentation."""
        return bool(self.listing_tier and self.listing_tier.strip())

    @property
    def slug(self) -> str:
        # Local import: slug module imports nothing from models at load time
        from vetlyst.services.slug import encode

        return encode(self.name, self.place_id)

    def __repr__(self) -> str:
        return f"<Clinic(place_id='{self.place_id}', name='{self.name}')>"
