"""
SQLite Store

SQLite implementation of CatalogStore and PricingStore.

One connection is shared between threads behind a lock. UNIQUE constraints
with INSERT ... ON CONFLICT make find-or-create and variant upserts atomic
across processes sharing the database file.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..models import (
    CatalogEntity,
    EntityKind,
    ImportRecord,
    ImportStatus,
    PriceOverride,
    PriceType,
    Product,
    Variant,
    VariantAttribute,
)
from .base import CatalogStore, PricingStore, StoreError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS entities (
    id          TEXT PRIMARY KEY,
    kind        TEXT NOT NULL,
    name        TEXT NOT NULL,
    slug        TEXT NOT NULL,
    color       TEXT,
    UNIQUE (kind, name)
);

CREATE TABLE IF NOT EXISTS products (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    slug        TEXT NOT NULL UNIQUE,
    group_key   TEXT NOT NULL,
    family      TEXT NOT NULL,
    category_id TEXT NOT NULL REFERENCES entities (id),
    brand_id    TEXT REFERENCES entities (id),
    active      INTEGER NOT NULL DEFAULT 1,
    UNIQUE (group_key, category_id)
);

CREATE TABLE IF NOT EXISTS variants (
    id                 TEXT PRIMARY KEY,
    sku                TEXT NOT NULL UNIQUE,
    product_id         TEXT NOT NULL REFERENCES products (id),
    designation        TEXT NOT NULL,
    power_kw           TEXT,
    capacity           TEXT,
    capacity_unit      TEXT,
    supplier_reference TEXT NOT NULL DEFAULT '',
    supplier_id        TEXT REFERENCES entities (id),
    stock              TEXT NOT NULL DEFAULT '0',
    catalog_price      TEXT NOT NULL DEFAULT '0',
    active             INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS variant_attributes (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    variant_id TEXT NOT NULL REFERENCES variants (id) ON DELETE CASCADE,
    name       TEXT NOT NULL,
    value      TEXT NOT NULL,
    unit       TEXT
);

CREATE INDEX IF NOT EXISTS idx_variant_attributes_variant ON variant_attributes (variant_id);

CREATE TABLE IF NOT EXISTS price_overrides (
    id          TEXT PRIMARY KEY,
    customer_id TEXT NOT NULL,
    variant_id  TEXT NOT NULL REFERENCES variants (id) ON DELETE CASCADE,
    price_type  TEXT NOT NULL CHECK (price_type IN ('FIXED', 'PERCENTAGE')),
    value       TEXT NOT NULL,
    start_date  TEXT,
    end_date    TEXT,
    note        TEXT,
    UNIQUE (customer_id, variant_id)
);

CREATE TABLE IF NOT EXISTS imports (
    id               TEXT PRIMARY KEY,
    filename         TEXT NOT NULL,
    status           TEXT NOT NULL,
    rows_processed   INTEGER NOT NULL DEFAULT 0,
    products_created INTEGER NOT NULL DEFAULT 0,
    variants_created INTEGER NOT NULL DEFAULT 0,
    errors           TEXT NOT NULL DEFAULT '',
    created_at       TEXT NOT NULL,
    completed_at     TEXT
);
"""


def _new_id() -> str:
    return uuid.uuid4().hex


def _dec(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _text(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _date(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class SQLiteStore(CatalogStore, PricingStore):
    """
    SQLite-backed catalog and pricing store.

    Usage:
        store = SQLiteStore("data/catalog.db")
        store.init_schema()
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    def connect(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            try:
                self._connection = sqlite3.connect(
                    self.db_path,
                    check_same_thread=False,  # Shared behind self._lock
                    timeout=30.0,
                )
                self._connection.row_factory = sqlite3.Row
                self._connection.execute("PRAGMA foreign_keys = ON")
                self._connection.execute("PRAGMA journal_mode = WAL")
            except sqlite3.Error as e:
                raise StoreError(f"Cannot open database {self.db_path}: {e}") from e
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements atomically; sqlite errors surface as StoreError."""
        with self._lock:
            conn = self.connect()
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(str(e)) from e
            except Exception:
                conn.rollback()
                raise

    def init_schema(self) -> None:
        """Create tables if they do not exist."""
        with self._lock:
            try:
                self.connect().executescript(SCHEMA)
            except sqlite3.Error as e:
                raise StoreError(f"Schema initialization failed: {e}") from e
        logger.info("Database schema initialized: %s", self.db_path)

    def _fetchone(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        with self.transaction() as conn:
            return conn.execute(query, params).fetchone()

    def _fetchall(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self.transaction() as conn:
            return conn.execute(query, params).fetchall()

    # ── Row mapping ──────────────────────────────────────────────────────────

    @staticmethod
    def _entity(row: sqlite3.Row) -> CatalogEntity:
        return CatalogEntity(
            id=row['id'], kind=EntityKind(row['kind']), name=row['name'],
            slug=row['slug'], color=row['color'],
        )

    @staticmethod
    def _product(row: sqlite3.Row) -> Product:
        return Product(
            id=row['id'], name=row['name'], slug=row['slug'], group_key=row['group_key'],
            family=row['family'], category_id=row['category_id'], brand_id=row['brand_id'],
            active=bool(row['active']),
        )

    @staticmethod
    def _variant(row: sqlite3.Row) -> Variant:
        return Variant(
            id=row['id'], sku=row['sku'], product_id=row['product_id'],
            designation=row['designation'], power_kw=_dec(row['power_kw']),
            capacity=_dec(row['capacity']), capacity_unit=row['capacity_unit'],
            supplier_reference=row['supplier_reference'], supplier_id=row['supplier_id'],
            stock=Decimal(row['stock']), catalog_price=Decimal(row['catalog_price']),
            active=bool(row['active']),
        )

    @staticmethod
    def _override(row: sqlite3.Row) -> PriceOverride:
        return PriceOverride(
            id=row['id'], customer_id=row['customer_id'], variant_id=row['variant_id'],
            price_type=PriceType(row['price_type']), value=Decimal(row['value']),
            start_date=_date(row['start_date']), end_date=_date(row['end_date']),
            note=row['note'],
        )

    @staticmethod
    def _import(row: sqlite3.Row) -> ImportRecord:
        return ImportRecord(
            id=row['id'], filename=row['filename'], status=ImportStatus(row['status']),
            rows_processed=row['rows_processed'], products_created=row['products_created'],
            variants_created=row['variants_created'], errors=row['errors'],
            created_at=_date(row['created_at']), completed_at=_date(row['completed_at']),
        )

    # ── Reference entities ───────────────────────────────────────────────────

    def list_entities(self, kind: EntityKind) -> List[CatalogEntity]:
        rows = self._fetchall("SELECT * FROM entities WHERE kind = ? ORDER BY name", (kind.value,))
        return [self._entity(r) for r in rows]

    def find_or_create_entity(
        self, kind: EntityKind, name: str, slug: str, color: Optional[str] = None
    ) -> CatalogEntity:
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO entities (id, kind, name, slug, color) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (kind, name) DO NOTHING
                """,
                (_new_id(), kind.value, name, slug, color),
            )
            row = conn.execute(
                "SELECT * FROM entities WHERE kind = ? AND name = ?", (kind.value, name)
            ).fetchone()
        return self._entity(row)

    # ── Products ─────────────────────────────────────────────────────────────

    def find_product(self, group_key: str, category_id: str) -> Optional[Product]:
        row = self._fetchone(
            "SELECT * FROM products WHERE group_key = ? AND category_id = ?", (group_key, category_id)
        )
        return self._product(row) if row else None

    def list_product_slugs(self) -> List[str]:
        return [r['slug'] for r in self._fetchall("SELECT slug FROM products")]

    def create_product(self, product: Product) -> Product:
        product.id = product.id or _new_id()
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO products (id, name, slug, group_key, family, category_id, brand_id, active)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (product.id, product.name, product.slug, product.group_key, product.family,
                 product.category_id, product.brand_id, int(product.active)),
            )
        return product

    def update_product(self, product: Product) -> Product:
        with self.transaction() as conn:
            cursor = conn.execute(
                "UPDATE products SET family = ?, brand_id = ? WHERE id = ?",
                (product.family, product.brand_id, product.id),
            )
            if cursor.rowcount == 0:
                raise KeyError(product.id)
        return product

    # ── Variants ─────────────────────────────────────────────────────────────

    def get_variant_by_sku(self, sku: str) -> Optional[Variant]:
        row = self._fetchone("SELECT * FROM variants WHERE sku = ?", (sku,))
        return self._variant(row) if row else None

    def upsert_variant(self, variant: Variant) -> Tuple[Variant, bool]:
        with self.transaction() as conn:
            created = conn.execute(
                "SELECT 1 FROM variants WHERE sku = ?", (variant.sku,)
            ).fetchone() is None
            conn.execute(
                """
                INSERT INTO variants (
                    id, sku, product_id, designation, power_kw, capacity, capacity_unit,
                    supplier_reference, supplier_id, stock, catalog_price, active
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (sku) DO UPDATE SET
                    designation = excluded.designation,
                    power_kw = excluded.power_kw,
                    capacity = excluded.capacity,
                    capacity_unit = excluded.capacity_unit,
                    supplier_reference = excluded.supplier_reference,
                    supplier_id = excluded.supplier_id,
                    stock = excluded.stock,
                    catalog_price = excluded.catalog_price,
                    active = excluded.active
                """,
                (variant.id or _new_id(), variant.sku, variant.product_id, variant.designation,
                 _text(variant.power_kw), _text(variant.capacity), variant.capacity_unit,
                 variant.supplier_reference, variant.supplier_id, str(variant.stock),
                 str(variant.catalog_price), int(variant.active)),
            )
            row = conn.execute("SELECT * FROM variants WHERE sku = ?", (variant.sku,)).fetchone()
        return self._variant(row), created

    def delete_variant_attributes(self, variant_id: str) -> int:
        with self.transaction() as conn:
            return conn.execute(
                "DELETE FROM variant_attributes WHERE variant_id = ?", (variant_id,)
            ).rowcount

    def create_variant_attributes(self, variant_id: str, attributes: Iterable[VariantAttribute]) -> None:
        with self.transaction() as conn:
            conn.executemany(
                "INSERT INTO variant_attributes (variant_id, name, value, unit) VALUES (?, ?, ?, ?)",
                [(variant_id, a.name, a.value, a.unit) for a in attributes],
            )

    def list_variant_attributes(self, variant_id: str) -> List[VariantAttribute]:
        rows = self._fetchall(
            "SELECT * FROM variant_attributes WHERE variant_id = ? ORDER BY id", (variant_id,)
        )
        return [VariantAttribute(r['name'], r['value'], r['unit'], r['variant_id']) for r in rows]

    # ── Import history ───────────────────────────────────────────────────────

    def save_import_record(self, record: ImportRecord) -> ImportRecord:
        record.id = record.id or _new_id()
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO imports (id, filename, status, rows_processed, products_created,
                    variants_created, errors, created_at, completed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (id) DO UPDATE SET
                    status = excluded.status,
                    rows_processed = excluded.rows_processed,
                    products_created = excluded.products_created,
                    variants_created = excluded.variants_created,
                    errors = excluded.errors,
                    completed_at = excluded.completed_at
                """,
                (record.id, record.filename, record.status.value, record.rows_processed,
                 record.products_created, record.variants_created, record.errors,
                 _iso(record.created_at), _iso(record.completed_at)),
            )
        return record

    def list_import_records(self, limit: int = 20) -> List[ImportRecord]:
        rows = self._fetchall("SELECT * FROM imports ORDER BY created_at DESC LIMIT ?", (limit,))
        return [self._import(r) for r in rows]

    # ── Statistics ───────────────────────────────────────────────────────────

    def count_products(self) -> int:
        return self._fetchone("SELECT COUNT(*) AS cnt FROM products")['cnt']

    def count_variants(self) -> int:
        return self._fetchone("SELECT COUNT(*) AS cnt FROM variants")['cnt']

    # ── Pricing ──────────────────────────────────────────────────────────────

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        row = self._fetchone("SELECT * FROM variants WHERE id = ?", (variant_id,))
        return self._variant(row) if row else None

    def get_variants(self, variant_ids: Iterable[str]) -> Dict[str, Variant]:
        ids = list(set(variant_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = self._fetchall(f"SELECT * FROM variants WHERE id IN ({placeholders})", tuple(ids))
        return {r['id']: self._variant(r) for r in rows}

    def get_override(self, customer_id: str, variant_id: str) -> Optional[PriceOverride]:
        row = self._fetchone(
            "SELECT * FROM price_overrides WHERE customer_id = ? AND variant_id = ?",
            (customer_id, variant_id),
        )
        return self._override(row) if row else None

    def get_overrides(self, customer_id: str, variant_ids: Iterable[str]) -> Dict[str, PriceOverride]:
        ids = list(set(variant_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = self._fetchall(
            f"SELECT * FROM price_overrides WHERE customer_id = ? AND variant_id IN ({placeholders})",
            (customer_id, *ids),
        )
        return {r['variant_id']: self._override(r) for r in rows}

    def save_override(self, override: PriceOverride) -> PriceOverride:
        with self.transaction() as conn:
            conn.execute(
                """
                INSERT INTO price_overrides (id, customer_id, variant_id, price_type, value,
                    start_date, end_date, note)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (customer_id, variant_id) DO UPDATE SET
                    price_type = excluded.price_type,
                    value = excluded.value,
                    start_date = excluded.start_date,
                    end_date = excluded.end_date,
                    note = excluded.note
                """,
                (override.id or _new_id(), override.customer_id, override.variant_id,
                 override.price_type.value, str(override.value), _iso(override.start_date),
                 _iso(override.end_date), override.note),
            )
            row = conn.execute(
                "SELECT * FROM price_overrides WHERE customer_id = ? AND variant_id = ?",
                (override.customer_id, override.variant_id),
            ).fetchone()
        return self._override(row)

    def delete_override(self, customer_id: str, variant_id: str) -> bool:
        with self.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM price_overrides WHERE customer_id = ? AND variant_id = ?",
                (customer_id, variant_id),
            )
            return cursor.rowcount > 0

    def list_overrides(
        self, customer_id: Optional[str] = None, variant_id: Optional[str] = None
    ) -> List[PriceOverride]:
        query = "SELECT * FROM price_overrides WHERE 1 = 1"
        params: list = []
        if customer_id is not None:
            query += " AND customer_id = ?"
            params.append(customer_id)
        if variant_id is not None:
            query += " AND variant_id = ?"
            params.append(variant_id)
        return [self._override(r) for r in self._fetchall(query, tuple(params))]
