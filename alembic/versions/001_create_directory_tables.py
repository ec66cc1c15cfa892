"""Create clinics, appointment_requests and clinic_claims tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Initial Vetlyst schema.
How:   PostgreSQL-specific: UUID primary keys filled by gen_random_uuid(),
       TIMESTAMP WITH TIME ZONE, descending created_at indexes for the
       newest-first submission lists.

Submissions deliberately carry no foreign key to clinics: clinic name and
email are copied onto each row so it stays readable if the clinic is
re-imported under a different id.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _status() -> sa.Column:
    return sa.Column(
        "status",
        sa.Text(),
        nullable=False,
        server_default=sa.text("'pending'"),
        comment="Workflow state; every new submission starts as 'pending'",
    )


def upgrade() -> None:
    # ── clinics ───────────────────────────────────────────────────────────
    op.create_table(
        "clinics",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "place_id",
            sa.String(255),
            nullable=False,
            comment="External place identifier; the clinic's true identity",
        ),
        sa.Column("clinic_name", sa.Text(), nullable=False),
        sa.Column("clinic_type", sa.Text(), nullable=True),
        sa.Column("site", sa.Text(), nullable=True),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("full_address", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("state", sa.Text(), nullable=True),
        sa.Column("zip", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("reviews", sa.Integer(), nullable=True),
        sa.Column("working_hours", sa.Text(), nullable=True),
        sa.Column("about", sa.Text(), nullable=True),
        sa.Column("photo", sa.Text(), nullable=True),
        sa.Column("listing_tier", sa.Text(), nullable=True),
        sa.Column(
            "lead_email",
            sa.Text(),
            nullable=True,
            comment="Where appointment request notifications are sent",
        ),
        sa.Column(
            "accepts_appointments",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("place_id", name="uq_clinics_place_id"),
    )
    op.create_index("idx_clinics_city", "clinics", ["city"])

    # ── appointment_requests ──────────────────────────────────────────────
    op.create_table(
        "appointment_requests",
        _uuid_pk(),
        sa.Column("clinic_place_id", sa.String(255), nullable=True),
        sa.Column("clinic_name", sa.Text(), nullable=True),
        sa.Column("clinic_email", sa.Text(), nullable=True),
        sa.Column("pet_owner_name", sa.Text(), nullable=False),
        sa.Column("pet_owner_email", sa.Text(), nullable=False),
        sa.Column("pet_owner_phone", sa.Text(), nullable=False),
        sa.Column("pet_name", sa.Text(), nullable=True),
        sa.Column("pet_type", sa.Text(), nullable=True),
        sa.Column("preferred_date", sa.Text(), nullable=True),
        sa.Column("preferred_time", sa.Text(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        _status(),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_appointment_requests_created_at",
        "appointment_requests",
        [sa.text("created_at DESC")],
    )

    # ── clinic_claims ─────────────────────────────────────────────────────
    op.create_table(
        "clinic_claims",
        _uuid_pk(),
        sa.Column("clinic_place_id", sa.String(255), nullable=False),
        sa.Column("clinic_name", sa.Text(), nullable=False),
        sa.Column("claimant_name", sa.Text(), nullable=False),
        sa.Column("claimant_email", sa.Text(), nullable=False),
        sa.Column("claimant_phone", sa.Text(), nullable=True),
        sa.Column("claimant_role", sa.Text(), nullable=False),
        sa.Column("verification_method", sa.Text(), nullable=False),
        sa.Column("verification_notes", sa.Text(), nullable=True),
        _status(),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_clinic_claims_created_at",
        "clinic_claims",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_clinic_claims_created_at", table_name="clinic_claims")
    op.drop_table("clinic_claims")
    op.drop_index("idx_appointment_requests_created_at", table_name="appointment_requests")
    op.drop_table("appointment_requests")
    op.drop_index("idx_clinics_city", table_name="clinics")
    op.drop_table("clinics")
