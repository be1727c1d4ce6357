"""
Catalog data models.

Pure data classes for persisted catalog entities.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class EntityKind(str, Enum):
    """Reference entity families resolved by name during an import."""
    CATEGORY = "category"
    BRAND = "brand"
    SUPPLIER = "supplier"


@dataclass
class CatalogEntity:
    """Category, brand or supplier. Name is unique per kind."""
    id: str
    kind: EntityKind
    name: str
    slug: str
    color: Optional[str] = None     # Display colour, categories only


@dataclass
class Product:
    """
    A product family grouping several variants.

    (group_key, category_id) is the identity; it and slug are assigned at
    creation and never change. family and brand_id follow the latest import.
    """
    id: str
    name: str                       # Canonical base name
    slug: str
    group_key: str
    family: str
    category_id: str
    brand_id: Optional[str] = None
    active: bool = True


@dataclass
class Variant:
    """A sellable unit identified by its SKU."""
    id: str
    sku: str
    product_id: str
    designation: str
    power_kw: Optional[Decimal] = None
    capacity: Optional[Decimal] = None
    capacity_unit: Optional[str] = None     # "L" or "kWh"
    supplier_reference: str = ""
    supplier_id: Optional[str] = None
    stock: Decimal = Decimal(0)
    catalog_price: Decimal = Decimal(0)     # Excluding tax (HT)
    active: bool = True


@dataclass
class VariantAttribute:
    """Technical fact derived from a variant designation."""
    name: str
    value: str
    unit: Optional[str] = None
    variant_id: str = ""
