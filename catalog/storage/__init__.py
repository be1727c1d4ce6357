"""
Persistence for catalog entities, variants and price overrides.

Modules:
    base - Store contracts and errors
    memory - In-process store (tests, dry runs)
    sqlite - SQLite store
"""

from .base import CatalogStore, PricingStore, StoreError, VariantNotFoundError
from .memory import InMemoryStore
from .sqlite import SQLiteStore

__all__ = [
    'CatalogStore',
    'PricingStore',
    'StoreError',
    'VariantNotFoundError',
    'InMemoryStore',
    'SQLiteStore',
]
