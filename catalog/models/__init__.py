"""
Data models for catalog import and pricing.

This module contains pure data classes with no business logic.
"""

from .catalog import CatalogEntity, EntityKind, Product, Variant, VariantAttribute
from .importing import ImportRecord, ImportResult, ImportStatus, ParsedVariant, ProductGroup
from .pricing import PriceOverride, PriceQuote, PriceType

__all__ = [
    'CatalogEntity',
    'EntityKind',
    'Product',
    'Variant',
    'VariantAttribute',
    'ParsedVariant',
    'ProductGroup',
    'ImportResult',
    'ImportRecord',
    'ImportStatus',
    'PriceOverride',
    'PriceQuote',
    'PriceType',
]
