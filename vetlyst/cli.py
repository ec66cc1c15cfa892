"""
Vetlyst Backend — Command Line Interface
==========================================

What:  Administrative commands for populating the directory.
Who:   Operators, via the `vetlyst` console script.

Commands:
    vetlyst import-clinics clinics.csv   Upsert clinics by place_id
    vetlyst import-tiers tiers.csv       Set listing_tier by clinic_name
    vetlyst init-db                      Create tables (development only;
                                         production runs `alembic upgrade head`)

Exit codes: 0 on success, 1 on any error.
"""

import argparse
import asyncio
import logging
from typing import Iterable, Optional

from vetlyst.database import async_session_factory, dispose_engine, init_models
from vetlyst.exceptions import VetlystError
from vetlyst.main import setup_logging
from vetlyst.services.importer import directory_importer

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vetlyst", description="Vetlyst directory administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    clinics = subparsers.add_parser("import-clinics", help="Import or update clinics from a CSV export")
    clinics.add_argument("csv_path", metavar="CSV", help="Path to the clinics CSV")

    tiers = subparsers.add_parser("import-tiers", help="Set listing tiers from a CSV export")
    tiers.add_argument("csv_path", metavar="CSV", help="CSV with clinic_name and emergency_status columns")

    subparsers.add_parser("init-db", help="Create all tables in DATABASE_URL")

    return parser


async def _import_clinics(csv_path: str) -> None:
    async with async_session_factory() as db:
        result = await directory_importer.import_clinics(db, csv_path)
    print(f"Imported: {result.imported}")
    print(f"Updated:  {result.updated}")
    print(f"Skipped:  {result.skipped}")


async def _import_tiers(csv_path: str) -> None:
    async with async_session_factory() as db:
        result = await directory_importer.import_tiers(db, csv_path)
    print(f"Updated: {result.updated}")
    print(f"Missing: {result.missing}")
    if result.skipped:
        print(f"Skipped: {result.skipped}")


async def _init_db() -> None:
    await init_models()
    print("Tables created.")


async def _run(args: argparse.Namespace) -> None:
    try:
        if args.command == "import-clinics":
            await _import_clinics(args.csv_path)
        elif args.command == "import-tiers":
            await _import_tiers(args.csv_path)
        elif args.command == "init-db":
            await _init_db()
    finally:
        await dispose_engine()


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging()

    try:
        asyncio.run(_run(args))
    except VetlystError as exc:
        logger.error("%s", exc.message)
        return 1
    except Exception as exc:  # noqa: BLE001
        logger.error("%s", exc, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
