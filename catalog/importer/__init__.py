"""
Catalog import pipeline.

Modules:
    grouping - ProductGrouper (rows -> product groups)
    reference_cache - Per-run category/brand/supplier lookup-or-create
    catalog_importer - CatalogImporter upserting products, variants, attributes
"""

from .catalog_importer import CatalogImporter, SlugRegistry, decode_export
from .grouping import ProductGrouper
from .reference_cache import ReferenceCache

__all__ = [
    'CatalogImporter',
    'ProductGrouper',
    'ReferenceCache',
    'SlugRegistry',
    'decode_export',
]
