#!/usr/bin/env python3
"""
Customer Prices

Resolve customer prices and administer price overrides.

Usage:
    # Effective price (excl. and incl. VAT)
    python3 scripts/customer_price.py get --variant VARIANT_ID [--customer CUST-42]

    # Fixed price or percentage discount, optionally time-boxed
    python3 scripts/customer_price.py set --customer CUST-42 --variant VARIANT_ID --type FIXED --value 99.90
    python3 scripts/customer_price.py set --customer CUST-42 --variant VARIANT_ID --type PERCENTAGE --value 10 \\
        --start 2026-01-01 --end 2026-03-31 --note "Q1 promo"

    # Remove / list overrides
    python3 scripts/customer_price.py delete --customer CUST-42 --variant VARIANT_ID
    python3 scripts/customer_price.py list [--customer CUST-42] [--variant VARIANT_ID]

Database path: --db flag, else CATALOG_DB_PATH (.env supported), else data/catalog.db
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from catalog.common.log_config import setup_logging
from catalog.pricing import PriceOverrideService, PriceResolver
from catalog.storage import SQLiteStore, StoreError, VariantNotFoundError

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "data/catalog.db"


def parse_date(value: str) -> datetime:
    """argparse type for ISO dates (2026-01-31 or 2026-01-31T18:00)."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def cmd_get(args, store: SQLiteStore) -> None:
    resolver = PriceResolver(store)
    quote = resolver.quote(args.customer, args.variant)
    print(f"Variant:      {quote.variant_id}")
    print(f"Customer:     {args.customer or '-'}")
    print(f"Price (HT):   {quote.price_excl_tax} EUR")
    print(f"Price (TTC):  {quote.price_incl_tax} EUR")


def cmd_set(args, store: SQLiteStore) -> None:
    service = PriceOverrideService(store)
    override = service.set_override(
        args.customer,
        args.variant,
        args.type,
        args.value,
        start_date=args.start,
        end_date=args.end,
        note=args.note,
    )
    print(f"✓ Override saved: {override.price_type.value} {override.value} "
          f"for {override.customer_id} / {override.variant_id}")


def cmd_delete(args, store: SQLiteStore) -> None:
    service = PriceOverrideService(store)
    if service.delete_override(args.customer, args.variant):
        print(f"✓ Override deleted for {args.customer} / {args.variant}")
    else:
        print(f"No override for {args.customer} / {args.variant}")


def cmd_list(args, store: SQLiteStore) -> None:
    service = PriceOverrideService(store)
    overrides = service.list_overrides(customer_id=args.customer, variant_id=args.variant)
    if not overrides:
        print("No overrides found")
        return

    print(f"{'Customer':<16} | {'Variant':<32} | {'Type':<10} | {'Value':>10} | {'Start':<10} | {'End':<10}")
    print("-" * 104)
    for o in overrides:
        start = o.start_date.date().isoformat() if o.start_date else "-"
        end = o.end_date.date().isoformat() if o.end_date else "-"
        print(f"{o.customer_id:<16} | {o.variant_id:<32} | {o.price_type.value:<10} | "
              f"{o.value:>10} | {start:<10} | {end:<10}")
    print(f"\n{len(overrides)} override(s)")


def main():
    parser = argparse.ArgumentParser(description="Customer price resolution and overrides")
    parser.add_argument(
        "--db",
        default=os.environ.get("CATALOG_DB_PATH", DEFAULT_DB_PATH),
        help=f"SQLite database path (default: $CATALOG_DB_PATH or {DEFAULT_DB_PATH})"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true", help="Show only warnings and errors")

    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Show the effective price of a variant")
    get_parser.add_argument("--variant", required=True, help="Variant id")
    get_parser.add_argument("--customer", help="Customer id (omit for the catalog price)")
    get_parser.set_defaults(func=cmd_get)

    set_parser = subparsers.add_parser("set", help="Create or update an override")
    set_parser.add_argument("--customer", required=True, help="Customer id")
    set_parser.add_argument("--variant", required=True, help="Variant id")
    set_parser.add_argument(
        "--type",
        required=True,
        type=str.upper,
        choices=["FIXED", "PERCENTAGE"],
        help="FIXED price or PERCENTAGE discount"
    )
    set_parser.add_argument("--value", required=True, help="Price, or discount percent")
    set_parser.add_argument("--start", type=parse_date, help="Start date (inclusive)")
    set_parser.add_argument("--end", type=parse_date, help="End date (inclusive)")
    set_parser.add_argument("--note", help="Free-text note")
    set_parser.set_defaults(func=cmd_set)

    delete_parser = subparsers.add_parser("delete", help="Delete an override")
    delete_parser.add_argument("--customer", required=True, help="Customer id")
    delete_parser.add_argument("--variant", required=True, help="Variant id")
    delete_parser.set_defaults(func=cmd_delete)

    list_parser = subparsers.add_parser("list", help="List overrides")
    list_parser.add_argument("--customer", help="Filter by customer id")
    list_parser.add_argument("--variant", help="Filter by variant id")
    list_parser.set_defaults(func=cmd_list)

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        with SQLiteStore(args.db) as store:
            store.init_schema()
            args.func(args, store)
    except VariantNotFoundError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"❌ Invalid override: {e}")
        sys.exit(1)
    except StoreError as e:
        logger.error("Database error: %s", e)
        print(f"❌ Database error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
