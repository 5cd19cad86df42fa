#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Civil Registry - sync engine command line.

Usage:
    python main.py upload
    python main.py download
    python main.py status
    python main.py import-csv members.csv --unit H001
"""

import argparse
import json
import sys

from app.config import Config
from repositories.database import Database
from repositories.local_stores import create_local_stores
from repositories.settings_repository import SettingsRepository
from services.api_client import ApiConfig, RegistryApiClient
from services.connectivity import ConnectivityChecker
from services.exceptions import SyncError, ValidationException
from services.import_service import ImportService
from services.media_store import RestMediaStore
from services.remote_store import create_remote_stores
from services.sync_session import SyncSession
from utils.logger import setup_logger


def build_session(db: Database) -> SyncSession:
    """Wire local repositories, remote stores and media storage into a session."""
    api_config = ApiConfig()
    client = RegistryApiClient(api_config)
    return SyncSession(
        local_stores=create_local_stores(db),
        remote_stores=create_remote_stores(client),
        media_store=RestMediaStore(api_config),
        api_client=client,
        connectivity=ConnectivityChecker(api_config.base_url),
        settings=SettingsRepository(db),
    )


def _print_progress(percent: int):
    print(f"\r{percent:3d}%", end="", flush=True)
    if percent >= 100:
        print()


def _run_sync(db: Database, direction: str, logger) -> int:
    session = build_session(db)
    try:
        if direction == "upload":
            result = session.run_upload(_print_progress)
        else:
            result = session.run_download(_print_progress)
    except SyncError as e:
        logger.error(f"Sync aborted: {e}")
        return 2

    print(result.summary())
    for issue in result.issues:
        print(f"  [{issue.kind}] {issue}")
    return 0 if result.success else 1


def _show_status(db: Database) -> int:
    status = build_session(db).get_status()
    print(json.dumps(status, indent=2))
    return 0


def _import_csv(db: Database, file_path: str, unit_code: str, include_duplicates: bool, logger) -> int:
    service = ImportService(db)
    try:
        result = service.import_csv(file_path, unit_code, include_duplicates=include_duplicates)
    except ValidationException as e:
        logger.error(f"Import failed: {e}")
        return 2
    except OSError as e:
        logger.error(f"Cannot read {file_path}: {e}")
        return 2

    print(f"Imported {result.imported} of {result.total_records} rows")
    for error in result.errors:
        print(f"  {error}")
    for duplicate in result.duplicates:
        best = duplicate.matches[0]
        print(
            f"  Row {duplicate.row}: possible duplicate of {best.member.member_code} "
            f"({best.match_score:.0%}: {', '.join(best.match_reasons)})"
        )
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="registry", description=Config.APP_TITLE)
    parser.add_argument("--db", help="SQLite database path (default: REGISTRY_DB_PATH)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("upload", help="Push local records to the remote registry")
    subparsers.add_parser("download", help="Pull remote records into the local store")
    subparsers.add_parser("status", help="Show last sync time and local record counts")

    import_parser = subparsers.add_parser("import-csv", help="Import members from a CSV file")
    import_parser.add_argument("file", help="CSV file")
    import_parser.add_argument("--unit", required=True, help="Unit code the members belong to")
    import_parser.add_argument(
        "--include-duplicates", action="store_true",
        help="Also insert rows flagged as probable duplicates"
    )
    return parser


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logger = setup_logger()

    db = Database(args.db or Config.DB_PATH)
    db.initialize()
    try:
        if args.command in ("upload", "download"):
            return _run_sync(db, args.command, logger)
        if args.command == "status":
            return _show_status(db)
        return _import_csv(db, args.file, args.unit, args.include_duplicates, logger)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
