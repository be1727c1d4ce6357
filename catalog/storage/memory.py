"""
In-Memory Store

Dictionary-backed implementation of CatalogStore and PricingStore.
Used by tests and dry runs. Every method holds one re-entrant lock, so
find-or-create is linearizable across threads.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from ..models import (
    CatalogEntity,
    EntityKind,
    ImportRecord,
    PriceOverride,
    Product,
    Variant,
    VariantAttribute,
)
from .base import CatalogStore, PricingStore


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryStore(CatalogStore, PricingStore):
    """Catalog and pricing store kept in process memory."""

    def __init__(self):
        self._lock = threading.RLock()
        self._entities: Dict[EntityKind, Dict[str, CatalogEntity]] = {kind: {} for kind in EntityKind}
        self._products: Dict[str, Product] = {}
        self._products_by_key: Dict[Tuple[str, str], str] = {}
        self._variants: Dict[str, Variant] = {}
        self._variants_by_sku: Dict[str, str] = {}
        self._attributes: Dict[str, List[VariantAttribute]] = {}
        self._overrides: Dict[Tuple[str, str], PriceOverride] = {}
        self._imports: Dict[str, ImportRecord] = {}

    # ── Reference entities ───────────────────────────────────────────────────

    def list_entities(self, kind: EntityKind) -> List[CatalogEntity]:
        with self._lock:
            return [replace(e) for e in self._entities[kind].values()]

    def find_or_create_entity(
        self, kind: EntityKind, name: str, slug: str, color: Optional[str] = None
    ) -> CatalogEntity:
        with self._lock:
            table = self._entities[kind]
            if name not in table:
                table[name] = CatalogEntity(id=_new_id(), kind=kind, name=name, slug=slug, color=color)
            return replace(table[name])

    # ── Products ─────────────────────────────────────────────────────────────

    def find_product(self, group_key: str, category_id: str) -> Optional[Product]:
        with self._lock:
            product_id = self._products_by_key.get((group_key, category_id))
            return replace(self._products[product_id]) if product_id else None

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
            return replace(product) if product else None

    def list_product_slugs(self) -> List[str]:
        with self._lock:
            return [p.slug for p in self._products.values()]

    def create_product(self, product: Product) -> Product:
        with self._lock:
            identity = (product.group_key, product.category_id)
            if identity in self._products_by_key:
                raise ValueError(f"Duplicate product: {product.group_key} in category {product.category_id}")
            stored = replace(product, id=product.id or _new_id())
            self._products[stored.id] = stored
            self._products_by_key[identity] = stored.id
            return replace(stored)

    def update_product(self, product: Product) -> Product:
        with self._lock:
            stored = self._products.get(product.id)
            if stored is None:
                raise KeyError(product.id)
            stored.family = product.family
            stored.brand_id = product.brand_id
            return replace(stored)

    # ── Variants ─────────────────────────────────────────────────────────────

    def get_variant_by_sku(self, sku: str) -> Optional[Variant]:
        with self._lock:
            variant_id = self._variants_by_sku.get(sku)
            return replace(self._variants[variant_id]) if variant_id else None

    def upsert_variant(self, variant: Variant) -> Tuple[Variant, bool]:
        with self._lock:
            existing_id = self._variants_by_sku.get(variant.sku)
            if existing_id is None:
                stored = replace(variant, id=variant.id or _new_id())
                self._variants[stored.id] = stored
                self._variants_by_sku[stored.sku] = stored.id
                return replace(stored), True

            existing = self._variants[existing_id]
            stored = replace(variant, id=existing.id, product_id=existing.product_id)
            self._variants[existing_id] = stored
            return replace(stored), False

    def list_variants(self, product_id: Optional[str] = None) -> List[Variant]:
        with self._lock:
            return [
                replace(v) for v in self._variants.values()
                if product_id is None or v.product_id == product_id
            ]

    def delete_variant_attributes(self, variant_id: str) -> int:
        with self._lock:
            return len(self._attributes.pop(variant_id, []))

    def create_variant_attributes(self, variant_id: str, attributes: Iterable[VariantAttribute]) -> None:
        with self._lock:
            rows = self._attributes.setdefault(variant_id, [])
            rows.extend(replace(a, variant_id=variant_id) for a in attributes)

    def list_variant_attributes(self, variant_id: str) -> List[VariantAttribute]:
        with self._lock:
            return [replace(a) for a in self._attributes.get(variant_id, [])]

    # ── Import history ───────────────────────────────────────────────────────

    def save_import_record(self, record: ImportRecord) -> ImportRecord:
        with self._lock:
            if not record.id:
                record.id = _new_id()
            self._imports[record.id] = replace(record)
            return record

    def list_import_records(self, limit: int = 20) -> List[ImportRecord]:
        with self._lock:
            records = sorted(self._imports.values(), key=lambda r: r.created_at, reverse=True)
            return [replace(r) for r in records[:limit]]

    # ── Statistics ───────────────────────────────────────────────────────────

    def count_products(self) -> int:
        with self._lock:
            return len(self._products)

    def count_variants(self) -> int:
        with self._lock:
            return len(self._variants)

    # ── Pricing ──────────────────────────────────────────────────────────────

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        with self._lock:
            variant = self._variants.get(variant_id)
            return replace(variant) if variant else None

    def get_variants(self, variant_ids: Iterable[str]) -> Dict[str, Variant]:
        with self._lock:
            return {
                vid: replace(self._variants[vid])
                for vid in set(variant_ids) if vid in self._variants
            }

    def get_override(self, customer_id: str, variant_id: str) -> Optional[PriceOverride]:
        with self._lock:
            override = self._overrides.get((customer_id, variant_id))
            return replace(override) if override else None

    def get_overrides(self, customer_id: str, variant_ids: Iterable[str]) -> Dict[str, PriceOverride]:
        with self._lock:
            result = {}
            for vid in set(variant_ids):
                override = self._overrides.get((customer_id, vid))
                if override is not None:
                    result[vid] = replace(override)
            return result

    def save_override(self, override: PriceOverride) -> PriceOverride:
        with self._lock:
            key = (override.customer_id, override.variant_id)
            existing = self._overrides.get(key)
            stored = replace(override, id=existing.id if existing else (override.id or _new_id()))
            self._overrides[key] = stored
            return replace(stored)

    def delete_override(self, customer_id: str, variant_id: str) -> bool:
        with self._lock:
            return self._overrides.pop((customer_id, variant_id), None) is not None

    def list_overrides(
        self, customer_id: Optional[str] = None, variant_id: Optional[str] = None
    ) -> List[PriceOverride]:
        with self._lock:
            return [
                replace(o) for (cid, vid), o in self._overrides.items()
                if (customer_id is None or cid == customer_id)
                and (variant_id is None or vid == variant_id)
            ]
