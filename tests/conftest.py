"""Shared test fixtures."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from catalog.extraction import BaseNameReducer, BrandMatcher, SupplierRowParser
from catalog.importer import CatalogImporter, ProductGrouper
from catalog.models import EntityKind, Product, Variant
from catalog.storage import InMemoryStore, SQLiteStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"

HEADER = (
    "Libellé Famille,Code article,Désignation,Référence fournisseur,"
    "Référence fournisseur,Fournisseur principal,Stock réel,Prix de vente"
)


def export_text(*lines: str) -> str:
    """Build export text with the standard header line."""
    return "\n".join((HEADER,) + lines) + "\n"


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def supplier_export():
    """Load the supplier export fixture."""
    return (FIXTURES_DIR / "supplier_export.csv").read_text(encoding="utf-8")


@pytest.fixture
def sample_brand_patterns():
    """Small ordered brand list for BrandMatcher tests (no config I/O)."""
    return [
        {"name": "Enphase", "pattern": r"\bENPHASE\b"},
        {"name": "Huawei", "pattern": r"\bHUAWEI\b"},
        {"name": "AP Systems", "pattern": r"\bAPS\b"},
        {"name": "Ariston", "pattern": r"\bARISTON\b|NUOS"},
    ]


@pytest.fixture
def sample_family_categories():
    """Small family -> category map for grouping tests."""
    return {
        "ENPHASE": "Solaire",
        "ONDULEURS HUAWEI": "Solaire",
        "STOCKAGE HUAWEI": "Stockage",
        "BALLONS": "Pompes à chaleur",
    }


@pytest.fixture
def sample_supplier_names():
    return {"SYAPSYSTEMS": "AP Systems", "SYMADEP": "Madep"}


@pytest.fixture
def row_parser():
    return SupplierRowParser()


@pytest.fixture
def grouper(sample_brand_patterns, sample_family_categories):
    """ProductGrouper using the repo reduction rules and the sample maps."""
    return ProductGrouper(
        brand_matcher=BrandMatcher(patterns=sample_brand_patterns),
        reducer=BaseNameReducer(),
        family_categories=sample_family_categories,
        default_category="Autres",
    )


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def sqlite_store():
    """Fresh in-memory SQLite store with schema."""
    store = SQLiteStore(":memory:")
    store.init_schema()
    yield store
    store.close()


@pytest.fixture
def importer(memory_store, row_parser, grouper, sample_supplier_names):
    return CatalogImporter(
        memory_store,
        parser=row_parser,
        grouper=grouper,
        supplier_names=sample_supplier_names,
        category_colors={"Solaire": "#7fb727"},
        default_color="#283084",
    )


@pytest.fixture
def fixed_now():
    return datetime(2026, 6, 15, 12, 0, 0)


@pytest.fixture
def make_export():
    """Return a builder for export text with the standard header line."""
    return export_text


def _add_variant(store, sku="SKU-1", price="100.00", stock="5"):
    category = store.find_or_create_entity(EntityKind.CATEGORY, "Solaire", "solaire")
    product = store.find_product(f"KEY_{sku}", category.id)
    if product is None:
        product = store.create_product(Product(
            id="", name=f"Product {sku}", slug=f"product-{sku.lower()}",
            group_key=f"KEY_{sku}", family="ENPHASE", category_id=category.id,
        ))
    variant, _ = store.upsert_variant(Variant(
        id="", sku=sku, product_id=product.id, designation=f"Designation {sku}",
        stock=Decimal(stock), catalog_price=Decimal(price),
    ))
    return variant


@pytest.fixture
def add_variant():
    """Return a helper inserting one product + variant into a store."""
    return _add_variant
