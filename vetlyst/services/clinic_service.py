"""
Vetlyst Backend — Clinic Directory Service
============================================

What:  Read-side queries for the directory: filtered listing, city list,
       and slug-addressed detail lookup.
Who:   Called by the clinics route handlers.

Query Patterns:
    - Listing: SELECT * FROM clinics [WHERE ...] ORDER BY clinic_name
      or ORDER BY rating DESC NULLS LAST, clinic_name
    - Cities:  SELECT DISTINCT city FROM clinics WHERE city <> '' ORDER BY city
    - Detail:  prefix match on place_id (see services/slug.py)

    The table holds one metro area's clinics (hundreds of rows), so there
    is no pagination and no full-text index; ILIKE scans are fine.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.exceptions import PersistenceError, VetlystError
from vetlyst.models.clinic import Clinic
from vetlyst.services import slug as slug_codec

logger = logging.getLogger(__name__)

SORT_NAME = "name"
SORT_RATING = "rating"


class ClinicService:
    """Stateless directory queries."""

    async def list_clinics(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        clinic_type: Optional[str] = None,
        city: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> List[Clinic]:
        """
        Filter and sort the directory.

        Args:
            search: Case-insensitive substring of the clinic name
            clinic_type: Case-insensitive substring of the clinic type
            city: Exact city match
            sort_by: 'rating' (highest first, unrated last); anything else sorts by name

        Empty strings mean "no filter". `%` and `_` typed by a user are
        matched literally.
        """
        query = select(Clinic)

        if search:
            query = query.where(Clinic.name.icontains(search, autoescape=True))
        if clinic_type:
            query = query.where(Clinic.clinic_type.icontains(clinic_type, autoescape=True))
        if city:
            query = query.where(Clinic.city == city)

        if sort_by == SORT_RATING:
            query = query.order_by(Clinic.rating.desc().nulls_last(), Clinic.name.asc())
        else:
            query = query.order_by(Clinic.name.asc())

        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing clinics: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Failed to fetch clinics",
                context={"error_type": type(e).__name__},
            ) from e

    async def list_cities(self, db: AsyncSession) -> List[str]:
        """Sorted distinct city names, skipping NULL and blank."""
        query = (
            select(Clinic.city)
            .where(Clinic.city.is_not(None), Clinic.city != "")
            .distinct()
            .order_by(Clinic.city.asc())
        )
        try:
            result = await db.execute(query)
            return [city for city in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing cities: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Failed to fetch cities",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_clinic_by_slug(self, db: AsyncSession, slug: str) -> Clinic:
        """
        Raises:
            NotFoundError: slug resolves to no clinic (→ 404)
            PersistenceError: lookup query failed (→ 500)
        """
        try:
            return await slug_codec.resolve(db, slug)
        except VetlystError:
            raise
        except Exception as e:
            logger.error("Database error resolving slug %s: %s", slug, str(e), exc_info=True)
            raise PersistenceError(
                message="Failed to fetch clinic",
                context={"slug": slug, "error_type": type(e).__name__},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
clinic_service = ClinicService()
