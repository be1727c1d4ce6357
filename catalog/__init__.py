"""
Supplier Catalog Sync

Modules:
    models      - Data models (Product, Variant, PriceOverride, ImportResult)
    common      - Shared utilities (config loader, slugs, French number parsing)
    extraction  - Row parsing, attribute extraction, brand and base-name rules
    importer    - Idempotent catalog import (grouping, reference cache, upserts)
    storage     - Store contracts, in-memory and SQLite stores
    pricing     - Customer price resolution and override administration
"""
