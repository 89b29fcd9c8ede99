import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError

from smartstock.core.logging import setup_logging
from smartstock.database import SessionLocal, engine, ensure_schema
from smartstock.database.kv_store import SqlKeyValueStore
from smartstock.services.ingestion_service import import_spreadsheet
from smartstock.services.persistence_service import attach_persistence, load_store


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import products from an .xlsx or .csv spreadsheet."
    )
    parser.add_argument("--path", required=True, help="Path to the spreadsheet.")
    parser.add_argument("--site", default=None, help="Site id for rows without one.")
    parser.add_argument("--responsible", default=None, help="Actor recorded in the audit log.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    ensure_schema(engine)
    backend = SqlKeyValueStore(SessionLocal)
    store = load_store(backend)
    attach_persistence(store, backend)
    try:
        result = import_spreadsheet(
            store,
            args.path,
            site_id=args.site,
            actor=args.responsible,
            dry_run=args.dry_run,
        )
    except (OSError, ValueError, SQLAlchemyError, InvalidFileException) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    print(
        f"{result['rows']} rows read, {result['imported']} imported, "
        f"{result['skipped']} skipped"
    )
    if args.dry_run:
        print("Dry run complete, no changes saved.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
