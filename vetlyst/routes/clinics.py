"""
Vetlyst Backend — Clinic Directory Route Handlers
===================================================

What:  GET /api/clinics, GET /api/clinics/{slug}, GET /api/cities.
Who:   Called by the directory home page and the clinic detail page.

Caching Strategy:
    Clinic rows change only on bulk import, so responses carry a short
    public cache (5 minutes) that a CDN may share between visitors.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.database import get_db_session
from vetlyst.schemas.clinic import ClinicResponse
from vetlyst.schemas.common import ErrorResponse
from vetlyst.services.clinic_service import clinic_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Clinics"])

DIRECTORY_CACHE_CONTROL = "public, max-age=300"


@router.get(
    "/clinics",
    response_model=List[ClinicResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Search and filter the clinic directory",
)
async def list_clinics(
    response: Response,
    search: str = Query(default="", description="Case-insensitive substring of the clinic name"),
    clinic_type: str = Query(
        default="",
        alias="clinicType",
        description="Case-insensitive substring of the clinic type",
    ),
    city: str = Query(default="", description="Exact city name"),
    sort_by: str = Query(
        default="",
        alias="sortBy",
        description="'rating' for highest rated first; default is alphabetical by name",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[ClinicResponse]:
    clinics = await clinic_service.list_clinics(
        db,
        search=search.strip(),
        clinic_type=clinic_type.strip(),
        city=city.strip(),
        sort_by=sort_by.strip(),
    )
    response.headers["X-Total-Count"] = str(len(clinics))
    response.headers["Cache-Control"] = DIRECTORY_CACHE_CONTROL
    return [ClinicResponse.model_validate(clinic) for clinic in clinics]


@router.get(
    "/clinics/{slug}",
    response_model=ClinicResponse,
    responses={
        404: {"description": "No clinic matches the slug", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a clinic by its slug",
)
async def get_clinic(
    slug: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ClinicResponse:
    """
    Resolve `dr-smith-s-clinic-abcdefgh` style slugs.

    Only the trailing short id is used for the lookup; the name part is
    decorative, so an outdated name in an old link still resolves.
    """
    clinic = await clinic_service.get_clinic_by_slug(db, slug)
    response.headers["Cache-Control"] = DIRECTORY_CACHE_CONTROL
    return ClinicResponse.model_validate(clinic)


@router.get(
    "/cities",
    response_model=List[str],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Distinct city names for the city filter",
)
async def list_cities(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[str]:
    cities = await clinic_service.list_cities(db)
    response.headers["Cache-Control"] = DIRECTORY_CACHE_CONTROL
    return cities
