"""
Vetlyst Backend — Directory Import Service
============================================

What:  Loads clinic rows and listing tiers from CSV exports into `clinics`.
Why:   The directory is populated in bulk from a data provider export; it is
       never edited through the HTTP API.
How:   Reads the file with aiofiles, parses it with csv.DictReader, and
       writes through the same async session factory the API uses.
Who:   The `vetlyst import-clinics` and `vetlyst import-tiers` commands.

Row Rules (import-clinics):
    - place_id is the identity: an existing row with the same place_id is
      updated in place, anything else is inserted.
    - Rows with a blank place_id or clinic_name are skipped and counted.
    - Numbers are parsed leniently: blank or unparseable becomes NULL.
    - Blank text cells become NULL.

Row Rules (import-tiers):
    - Matches clinics by exact clinic_name (after stripping whitespace).
    - listing_tier is taken from the emergency_status column; blank clears it.
"""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import aiofiles
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vetlyst.exceptions import ImportFileError, PersistenceError
from vetlyst.models.clinic import Clinic

logger = logging.getLogger(__name__)

# CSV column → Clinic attribute, for plain text fields
TEXT_COLUMNS: Dict[str, str] = {
    "clinic_name": "name",
    "clinic_type": "clinic_type",
    "site": "site",
    "phone": "phone",
    "full_address": "full_address",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "working_hours": "working_hours",
    "about": "about",
    "photo": "photo",
    "listing_tier": "listing_tier",
    "lead_email": "lead_email",
}
FLOAT_COLUMNS = ("latitude", "longitude", "rating")
INT_COLUMNS = ("reviews",)
BOOL_COLUMNS = ("accepts_appointments",)

CLINIC_REQUIRED_COLUMNS = ("place_id", "clinic_name")
TIER_REQUIRED_COLUMNS = ("clinic_name", "emergency_status")

TRUE_VALUES = frozenset({"true", "t", "yes", "y", "1"})

# place_id lookups per SELECT
LOOKUP_BATCH_SIZE = 500


@dataclass
class ClinicImportResult:
    imported: int = 0
    updated: int = 0
    skipped: int = 0


@dataclass
class TierImportResult:
    updated: int = 0
    missing: int = 0
    skipped: int = 0


# ── Cell Parsing ──────────────────────────────────────────────────────────

def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_float(value: Optional[str]) -> Optional[float]:
    value = clean_text(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_int(value: Optional[str]) -> Optional[int]:
    """Accepts "12", "12.0" and "1,204"; anything else is None."""
    value = clean_text(value)
    if value is None:
        return None
    try:
        return int(float(value.replace(",", "")))
    except ValueError:
        return None


def parse_bool(value: Optional[str]) -> bool:
    value = clean_text(value)
    return bool(value) and value.lower() in TRUE_VALUES


def row_to_values(row: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """
    Map one CSV record to Clinic attribute values.

    Only columns present in the file are returned, so a re-import from a
    narrower export does not wipe fields it does not carry.
    """
    values: Dict[str, Any] = {}
    for column, attr in TEXT_COLUMNS.items():
        if column in row:
            values[attr] = clean_text(row[column])
    for column in FLOAT_COLUMNS:
        if column in row:
            values[column] = parse_float(row[column])
    for column in INT_COLUMNS:
        if column in row:
            values[column] = parse_int(row[column])
    for column in BOOL_COLUMNS:
        if column in row:
            values[column] = parse_bool(row[column])
    return values


# ── File Reading ──────────────────────────────────────────────────────────

async def read_csv(path: str, required: Iterable[str]) -> List[Dict[str, Optional[str]]]:
    """
    Read a CSV file into a list of dicts keyed by header.

    Raises:
        ImportFileError: File missing or unreadable, or a required column absent.
    """
    try:
        # utf-8-sig: spreadsheet exports often start with a BOM
        async with aiofiles.open(path, "r", encoding="utf-8-sig", newline="") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFileError(f"Cannot read {path}: {e}", path=path) from e

    reader = csv.DictReader(io.StringIO(content))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    missing = [column for column in required if column not in headers]
    if missing:
        raise ImportFileError(
            f"{path} is missing required column(s): {', '.join(missing)}",
            path=path,
            context={"missing_columns": missing},
        )

    rows = []
    for record in reader:
        rows.append({(k or "").strip(): v for k, v in record.items()})
    return rows


# ── Import Operations ─────────────────────────────────────────────────────

class DirectoryImporter:
    """Bulk writes to the clinics table. One transaction per import."""

    async def import_clinics(self, db: AsyncSession, path: str) -> ClinicImportResult:
        rows = await read_csv(path, CLINIC_REQUIRED_COLUMNS)
        result = ClinicImportResult()

        # Last row wins when the file repeats a place_id
        pending: Dict[str, Dict[str, Any]] = {}
        for line_no, row in enumerate(rows, start=2):
            place_id = clean_text(row.get("place_id"))
            name = clean_text(row.get("clinic_name"))
            if not place_id or not name:
                logger.warning("%s:%d skipped: missing place_id or clinic_name", path, line_no)
                result.skipped += 1
                continue
            pending[place_id] = row_to_values(row)

        try:
            existing = await self._existing_by_place_id(db, list(pending))
            for place_id, values in pending.items():
                clinic = existing.get(place_id)
                if clinic is None:
                    db.add(Clinic(place_id=place_id, **values))
                    result.imported += 1
                else:
                    for attr, value in values.items():
                        setattr(clinic, attr, value)
                    result.updated += 1
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Clinic import from %s failed: %s", path, str(e), exc_info=True)
            raise PersistenceError(context={"path": path, "error": str(e)}) from e

        logger.info(
            "Clinic import from %s: %d imported, %d updated, %d skipped",
            path,
            result.imported,
            result.updated,
            result.skipped,
        )
        return result

    async def import_tiers(self, db: AsyncSession, path: str) -> TierImportResult:
        rows = await read_csv(path, TIER_REQUIRED_COLUMNS)
        result = TierImportResult()

        try:
            for row in rows:
                name = clean_text(row.get("clinic_name"))
                if not name:
                    result.skipped += 1
                    continue
                tier = clean_text(row.get("emergency_status"))
                outcome = await db.execute(
                    update(Clinic).where(Clinic.name == name).values(listing_tier=tier)
                )
                if outcome.rowcount:
                    result.updated += outcome.rowcount
                else:
                    logger.warning("No clinic named %r; tier not applied", name)
                    result.missing += 1
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Tier import from %s failed: %s", path, str(e), exc_info=True)
            raise PersistenceError(context={"path": path, "error": str(e)}) from e

        logger.info(
            "Tier import from %s: %d updated, %d missing, %d skipped",
            path,
            result.updated,
            result.missing,
            result.skipped,
        )
        return result

    async def _existing_by_place_id(
        self, db: AsyncSession, place_ids: List[str]
    ) -> Dict[str, Clinic]:
        found: Dict[str, Clinic] = {}
        for start in range(0, len(place_ids), LOOKUP_BATCH_SIZE):
            batch = place_ids[start:start + LOOKUP_BATCH_SIZE]
            rows = await db.execute(select(Clinic).where(Clinic.place_id.in_(batch)))
            for clinic in rows.scalars():
                found[clinic.place_id] = clinic
        return found


# ── Singleton Instance ────────────────────────────────────────────────────
directory_importer = DirectoryImporter()
