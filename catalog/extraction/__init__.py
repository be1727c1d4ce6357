"""
Extraction modules for supplier exports.

Modules:
    row_parser - SupplierRowParser turning export text into ParsedVariant rows
    attributes - Power, capacity, phase and amperage extraction
    brand_matcher - Ordered brand detection
    base_name - BaseNameReducer producing canonical product names
    group_key - Stable product identity keys
"""

from .attributes import (
    Capacity,
    extract_amperage,
    extract_attributes,
    extract_capacity,
    extract_phase,
    extract_power,
)
from .base_name import BaseNameReducer
from .brand_matcher import BrandMatcher
from .group_key import generate_group_key
from .row_parser import SupplierRowParser, split_line

__all__ = [
    # Row parsing
    'SupplierRowParser',
    'split_line',
    # Attributes
    'Capacity',
    'extract_power',
    'extract_capacity',
    'extract_phase',
    'extract_amperage',
    'extract_attributes',
    # Brands
    'BrandMatcher',
    # Product identity
    'BaseNameReducer',
    'generate_group_key',
]
