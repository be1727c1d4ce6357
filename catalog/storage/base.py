"""
Store Contracts

Abstract persistence interfaces used by the import engine (CatalogStore) and
the price resolver (PricingStore). Implementations must make
find_or_create_entity atomic: two concurrent callers asking for the same new
name get the same entity.
"""

from abc import ABC, abstractmethod
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


class StoreError(RuntimeError):
    """A persistence operation failed."""


class VariantNotFoundError(LookupError):
    """No variant exists with the requested id."""

    def __init__(self, variant_ids):
        if isinstance(variant_ids, str):
            variant_ids = [variant_ids]
        self.variant_ids = list(variant_ids)
        super().__init__(f"Variant not found: {', '.join(self.variant_ids)}")


class CatalogStore(ABC):
    """Persistence used by the catalog import."""

    # ── Reference entities ───────────────────────────────────────────────────

    @abstractmethod
    def list_entities(self, kind: EntityKind) -> List[CatalogEntity]:
        """Return every category, brand or supplier."""

    @abstractmethod
    def find_or_create_entity(
        self, kind: EntityKind, name: str, slug: str, color: Optional[str] = None
    ) -> CatalogEntity:
        """Return the entity named `name`, creating it if missing (atomic)."""

    # ── Products ─────────────────────────────────────────────────────────────

    @abstractmethod
    def find_product(self, group_key: str, category_id: str) -> Optional[Product]:
        """Return the product identified by (group key, category), if any."""

    @abstractmethod
    def list_product_slugs(self) -> List[str]:
        """Return every slug already assigned to a product."""

    @abstractmethod
    def create_product(self, product: Product) -> Product:
        """Insert a product; assigns product.id when empty. (group key, category) is unique."""

    @abstractmethod
    def update_product(self, product: Product) -> Product:
        """Persist family and brand of an existing product."""

    # ── Variants ─────────────────────────────────────────────────────────────

    @abstractmethod
    def get_variant_by_sku(self, sku: str) -> Optional[Variant]:
        """Return the variant with this SKU, if any."""

    @abstractmethod
    def upsert_variant(self, variant: Variant) -> Tuple[Variant, bool]:
        """
        Insert or update a variant keyed by SKU.

        On update every mutable field is overwritten; id and product_id of
        the stored row are kept. Returns (stored variant, created).
        """

    @abstractmethod
    def delete_variant_attributes(self, variant_id: str) -> int:
        """Delete all attributes of a variant; returns the count deleted."""

    @abstractmethod
    def create_variant_attributes(self, variant_id: str, attributes: Iterable[VariantAttribute]) -> None:
        """Insert attributes for a variant."""

    @abstractmethod
    def list_variant_attributes(self, variant_id: str) -> List[VariantAttribute]:
        """Return the attributes of a variant."""

    # ── Import history ───────────────────────────────────────────────────────

    @abstractmethod
    def save_import_record(self, record: ImportRecord) -> ImportRecord:
        """Insert or update an import history record."""

    @abstractmethod
    def list_import_records(self, limit: int = 20) -> List[ImportRecord]:
        """Return the most recent import records, newest first."""

    # ── Statistics ───────────────────────────────────────────────────────────

    @abstractmethod
    def count_products(self) -> int:
        """Return the number of products."""

    @abstractmethod
    def count_variants(self) -> int:
        """Return the number of variants."""


class PricingStore(ABC):
    """Persistence used by price resolution and override administration."""

    @abstractmethod
    def get_variant(self, variant_id: str) -> Optional[Variant]:
        """Return a variant by id."""

    @abstractmethod
    def get_variants(self, variant_ids: Iterable[str]) -> Dict[str, Variant]:
        """Return the variants with these ids in one read, keyed by id."""

    @abstractmethod
    def get_override(self, customer_id: str, variant_id: str) -> Optional[PriceOverride]:
        """Return the override of a (customer, variant) pair."""

    @abstractmethod
    def get_overrides(self, customer_id: str, variant_ids: Iterable[str]) -> Dict[str, PriceOverride]:
        """Return a customer's overrides for these variants in one read, keyed by variant id."""

    @abstractmethod
    def save_override(self, override: PriceOverride) -> PriceOverride:
        """Insert or replace the override of its (customer, variant) pair."""

    @abstractmethod
    def delete_override(self, customer_id: str, variant_id: str) -> bool:
        """Delete the override of a pair; returns True if one existed."""

    @abstractmethod
    def list_overrides(
        self, customer_id: Optional[str] = None, variant_id: Optional[str] = None
    ) -> List[PriceOverride]:
        """Return overrides, optionally filtered by customer and/or variant."""
