"""
Catalog Importer

Imports a supplier export into the catalog store.

Features:
- Idempotent: re-importing the same file updates products and variants in
  place (products by group key and category, variants by SKU)
- The export is authoritative: variant fields are overwritten on every run
  and derived attributes are rebuilt from scratch
- Best-effort: a failing product or variant is recorded and skipped
- Optional thread pool for group-level parallelism
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..common.config_loader import (
    load_category_colors,
    load_category_defaults,
    load_import_settings,
    load_supplier_names,
)
from ..common.slugs import unique_slug
from ..extraction.attributes import extract_attributes, extract_capacity, extract_power
from ..extraction.row_parser import SupplierRowParser
from ..models import (
    ImportRecord,
    ImportResult,
    ParsedVariant,
    Product,
    ProductGroup,
    Variant,
)
from ..storage.base import CatalogStore, StoreError
from .grouping import ProductGrouper
from .reference_cache import ReferenceCache

logger = logging.getLogger(__name__)

# Errors that fail one item without stopping the run
ITEM_ERRORS = (StoreError, ValueError, KeyError, TypeError)


def decode_export(data: bytes) -> str:
    """
    Decode a supplier export.

    Exports saved from Excel are often cp1252 rather than UTF-8.

    Raises:
        UnicodeDecodeError: If the bytes are neither UTF-8 nor cp1252
    """
    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError:
        logger.warning("Export is not UTF-8, decoding as cp1252")
        return data.decode('cp1252')


class SlugRegistry:
    """Thread-safe set of product slugs already taken."""

    def __init__(self, taken: Iterable[str] = ()):
        self._taken = set(taken)
        self._lock = threading.Lock()

    def allocate(self, name: str) -> str:
        with self._lock:
            slug = unique_slug(name, self._taken.__contains__)
            self._taken.add(slug)
            return slug


@dataclass
class GroupOutcome:
    products: int = 0
    variants: int = 0
    errors: List[str] = field(default_factory=list)


class CatalogImporter:
    """
    Upserts supplier exports into a CatalogStore.

    Usage:
        importer = CatalogImporter(store)
        result = importer.run(text)
        if not result.success:
            print(result.errors)
    """

    def __init__(
        self,
        store: CatalogStore,
        parser: Optional[SupplierRowParser] = None,
        grouper: Optional[ProductGrouper] = None,
        supplier_names: Optional[Dict[str, str]] = None,
        category_colors: Optional[Dict[str, str]] = None,
        default_color: Optional[str] = None,
        workers: int = 1,
    ):
        """
        Initialize the importer.

        Args:
            store: Catalog persistence
            parser: Row parser (built from config/import.yaml if None)
            grouper: Product grouper (built from config if None)
            supplier_names: Supplier code -> name (loads config if None)
            category_colors: Category name -> colour (loads config if None)
            default_color: Colour of unconfigured categories (loads config if None)
            workers: Number of threads processing product groups
        """
        self.store = store

        if parser is None:
            settings = load_import_settings()
            parser = SupplierRowParser(settings['delimiter'], settings['invalid_families'])
        self.parser = parser
        self.grouper = grouper or ProductGrouper()

        self.supplier_names = load_supplier_names() if supplier_names is None else supplier_names
        self.category_colors = load_category_colors() if category_colors is None else category_colors
        if default_color is None:
            default_color = load_category_defaults()['color']
        self.default_color = default_color

        self.workers = max(1, workers)
        self._product_lock = threading.Lock()

    # ── Entry points ─────────────────────────────────────────────────────────

    def import_file(self, path: str | Path) -> ImportResult:
        """
        Import an export file and record the run in the import history.

        Args:
            path: Path to the export file

        Returns:
            ImportResult (success=False with one error if the file is unreadable)
        """
        path = Path(path)
        record = ImportRecord(filename=path.name)
        try:
            self.store.save_import_record(record)
        except StoreError as e:
            logger.error("Cannot record import of %s: %s", path.name, e)
            return ImportResult.failed(f"Import aborted: {e}")

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error("Cannot read %s: %s", path, e)
            result = ImportResult.failed(f"Cannot read {path.name}: {e}")
        else:
            result = self.run(data)

        record.complete(result)
        try:
            self.store.save_import_record(record)
        except StoreError as e:
            logger.warning("Could not update import record %s: %s", record.id, e)
        return result

    def run(self, content: str | bytes) -> ImportResult:
        """
        Import export content.

        Args:
            content: Export text (or raw bytes, decoded as UTF-8/cp1252)

        Returns:
            Aggregate counts and per-item errors
        """
        try:
            text = decode_export(content) if isinstance(content, bytes) else content
            rows = self.parser.parse(text)
            cache = ReferenceCache(self.store, self.category_colors, self.default_color)
            cache.preload()
            slugs = SlugRegistry(self.store.list_product_slugs())
        except (UnicodeDecodeError, StoreError) as e:
            logger.error("Import aborted: %s", e)
            return ImportResult.failed(f"Import aborted: {e}")

        result = ImportResult(rows_processed=len(rows), rows_rejected=self.parser.rows_rejected)
        groups = list(self.grouper.group(rows).values())

        if self.workers > 1 and len(groups) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                outcomes = list(pool.map(lambda g: self._process_group(g, cache, slugs), groups))
        else:
            outcomes = [self._process_group(group, cache, slugs) for group in groups]

        for outcome in outcomes:
            result.products_created += outcome.products
            result.variants_created += outcome.variants
            result.errors.extend(outcome.errors)

        logger.info(
            "Import finished: %d rows, %d products, %d variants, %d errors",
            result.rows_processed, result.products_created,
            result.variants_created, len(result.errors),
        )
        if any(cache.created.values()):
            logger.info(
                "New reference entities: %s",
                ", ".join(f"{count} {kind.value}" for kind, count in cache.created.items() if count),
            )
        return result

    # ── Per-group processing ─────────────────────────────────────────────────

    def _process_group(self, group: ProductGroup, cache: ReferenceCache, slugs: SlugRegistry) -> GroupOutcome:
        outcome = GroupOutcome()

        try:
            product = self.resolve_product(group, cache, slugs)
        except ITEM_ERRORS as e:
            message = f"Product error {group.base_name}: {e}"
            logger.error(message)
            outcome.errors.append(message)
            return outcome
        outcome.products += 1

        for row in group.variants:
            try:
                self.upsert_variant(row, product, cache)
            except ITEM_ERRORS as e:
                message = f"Variant error {row.sku}: {e}"
                logger.error(message)
                outcome.errors.append(message)
                continue
            outcome.variants += 1

        return outcome

    def resolve_product(self, group: ProductGroup, cache: ReferenceCache, slugs: SlugRegistry) -> Product:
        """
        Find the product of a group by (group key, category), or create it.

        An existing product gets its family and brand refreshed; its group
        key, category and slug never change.
        """
        category_id = cache.category(group.category_name)
        brand_id = cache.brand(group.brand_name) if group.brand_name else None

        # Lookup and create must not interleave for the same identity
        with self._product_lock:
            product = self.store.find_product(group.group_key, category_id)
            if product is not None:
                product.family = group.family
                product.brand_id = brand_id
                return self.store.update_product(product)

            product = Product(
                id="",
                name=group.base_name,
                slug=slugs.allocate(group.base_name),
                group_key=group.group_key,
                family=group.family,
                category_id=category_id,
                brand_id=brand_id,
            )
            product = self.store.create_product(product)
            logger.debug("Created product %s (%s)", product.slug, product.group_key)
            return product

    def resolve_supplier(self, supplier_code: str, cache: ReferenceCache) -> Optional[str]:
        """Map a supplier code to a supplier id; codes shorter than 2 chars mean none."""
        name = self.supplier_names.get(supplier_code, supplier_code)
        if not name or len(name) < 2:
            return None
        return cache.supplier(name)

    def upsert_variant(self, row: ParsedVariant, product: Product, cache: ReferenceCache) -> Variant:
        """
        Create or overwrite the variant of a row, then rebuild its attributes.
        """
        capacity = extract_capacity(row.designation)
        variant = Variant(
            id="",
            sku=row.sku,
            product_id=product.id,
            designation=row.designation,
            power_kw=extract_power(row.designation),
            capacity=capacity.value if capacity else None,
            capacity_unit=capacity.unit if capacity else None,
            supplier_reference=row.supplier_reference,
            supplier_id=self.resolve_supplier(row.supplier_code, cache),
            stock=row.stock,
            catalog_price=row.price,
            active=row.active,
        )
        variant, created = self.store.upsert_variant(variant)

        self.store.delete_variant_attributes(variant.id)
        attributes = extract_attributes(row.designation)
        if attributes:
            self.store.create_variant_attributes(variant.id, attributes)

        logger.debug("%s variant %s", "Created" if created else "Updated", variant.sku)
        return variant
