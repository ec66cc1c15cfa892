"""
Vetlyst Backend — Clinic Slug Codec
=====================================

What:  Derives the URL segment for a clinic page and resolves it back to a row.
Why:   Place ids are opaque ("ChIJN1t_tDeuEmsRUsoyG83frY4"); a readable
       slug like `ace-vet-clinic-ChIJN1t_` is friendlier in links and search
       results while still carrying enough of the id to find the record.
How:   encode() is a pure string transform. resolve() splits off the last
       segment and prefix-matches it against stored place ids.

Slug format:
    lowercase(name)
      → every run of chars outside [a-z0-9] becomes one '-'
      → leading/trailing '-' stripped
      + '-' + place_id[:8]

    Encode("Dr. Smith's Clinic!!", "abcdefgh1234") == "dr-smith-s-clinic-abcdefgh"

Known limitations:
    - Not unique: two clinics with the same cleaned name whose place ids share
      the first 8 characters get the same slug. Resolution then returns the
      earliest-imported one. Widen `length` if that ever matters.
    - A short id that itself contains '-' cannot be recovered by decode(),
      which only looks at the final segment.
"""

import logging
import re
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.exceptions import NotFoundError
from vetlyst.models.clinic import Clinic

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 8

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def encode(name: str, external_id: str, length: int = SHORT_ID_LENGTH) -> str:
    """Build the slug for a clinic. Deterministic; no hidden state."""
    cleaned = _NON_SLUG_CHARS.sub("-", name.lower()).strip("-")
    return f"{cleaned}-{external_id[:length]}"


def decode(slug: str) -> str:
    """Return the short id carried by a slug (its last '-' segment)."""
    return slug.split("-")[-1]


async def resolve_by_prefix(db: AsyncSession, short_id: str) -> Optional[Clinic]:
    """
    Find the clinic whose place id starts with `short_id`.

    Query plan:
        SELECT * FROM clinics WHERE substr(place_id, 1, :n) = :short_id
        ORDER BY created_at, id LIMIT 1

    The ORDER BY makes multi-match resolution deterministic regardless of
    the store's physical row order. Comparing a substring instead of using
    LIKE keeps the match case-sensitive on every backend (SQLite LIKE folds
    ASCII case) and leaves `%` and `_` with no special meaning.

    Returns None for an empty short id (it would otherwise match every row).
    """
    if not short_id:
        return None

    result = await db.execute(
        select(Clinic)
        .where(func.substr(Clinic.place_id, 1, len(short_id)) == short_id)
        .order_by(Clinic.created_at.asc(), Clinic.id.asc())
        .limit(1)
    )
    return result.scalars().first()


async def resolve(db: AsyncSession, slug: str) -> Clinic:
    """
    Resolve an incoming slug to its clinic.

    Raises:
        NotFoundError: no place id starts with the slug's short id (→ 404)
    """
    short_id = decode(slug)
    clinic = await resolve_by_prefix(db, short_id)
    if clinic is None:
        logger.info("Slug %s did not resolve (short id %r)", slug, short_id)
        raise NotFoundError(resource="clinic", resource_id=slug)
    return clinic
