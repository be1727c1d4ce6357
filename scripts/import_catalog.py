#!/usr/bin/env python3
"""
Catalog Import

Imports a supplier export (CSV, 8 columns) into the catalog database.
Re-running the same file is safe: products and variants are updated in place.

Usage:
    python3 scripts/import_catalog.py --file data/export.csv
    python3 scripts/import_catalog.py --file export.csv --db data/catalog.db
    python3 scripts/import_catalog.py --file export.csv --delimiter ';' --workers 4

Database path (in order of precedence):
    1. --db flag
    2. CATALOG_DB_PATH environment variable (.env supported)
    3. data/catalog.db
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from catalog.common.config_loader import load_import_settings
from catalog.common.log_config import setup_logging
from catalog.extraction import SupplierRowParser
from catalog.importer import CatalogImporter
from catalog.storage import SQLiteStore, StoreError

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "data/catalog.db"
MAX_ERRORS_SHOWN = 20


def print_summary(result, store: SQLiteStore) -> None:
    """Print the run summary to stdout."""
    print("\n" + "=" * 60)
    print("Import Summary")
    print("=" * 60)
    print(f"  Rows processed:   {result.rows_processed}")
    print(f"  Rows rejected:    {result.rows_rejected}")
    print(f"  Products upserted: {result.products_created}")
    print(f"  Variants upserted: {result.variants_created}")
    print(f"  Errors:           {len(result.errors)}")
    print(f"  Catalog size:     {store.count_products()} products, {store.count_variants()} variants")

    if result.errors:
        print("\nErrors:")
        for error in result.errors[:MAX_ERRORS_SHOWN]:
            print(f"  - {error}")
        if len(result.errors) > MAX_ERRORS_SHOWN:
            print(f"  ... and {len(result.errors) - MAX_ERRORS_SHOWN} more")


def main():
    parser = argparse.ArgumentParser(
        description="Import a supplier export into the catalog"
    )
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="Supplier export file (CSV)"
    )
    parser.add_argument(
        "--db",
        default=os.environ.get("CATALOG_DB_PATH", DEFAULT_DB_PATH),
        help=f"SQLite database path (default: $CATALOG_DB_PATH or {DEFAULT_DB_PATH})"
    )
    parser.add_argument(
        "--delimiter", "-d",
        help="Field delimiter (default: from config/import.yaml)"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=1,
        help="Worker threads processing products (default: 1)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not os.path.exists(args.file):
        print(f"Export file not found: {args.file}")
        sys.exit(1)

    settings = load_import_settings()
    row_parser = SupplierRowParser(
        delimiter=args.delimiter or settings['delimiter'],
        invalid_families=settings['invalid_families'],
    )

    print("=" * 60)
    print("Catalog Import")
    print("=" * 60)
    print(f"  Export file:      {args.file}")
    print(f"  Database:         {args.db}")
    print(f"  Delimiter:        {row_parser.delimiter!r}")
    print(f"  Workers:          {args.workers}")

    try:
        with SQLiteStore(args.db) as store:
            store.init_schema()
            importer = CatalogImporter(store, parser=row_parser, workers=args.workers)
            result = importer.import_file(args.file)
            print_summary(result, store)
    except StoreError as e:
        logger.error("Database error: %s", e)
        print(f"\n❌ Database error: {e}")
        sys.exit(1)

    if not result.success:
        print("\n❌ Import finished with errors")
        sys.exit(1)

    print("\n✅ Import complete")


if __name__ == "__main__":
    main()
