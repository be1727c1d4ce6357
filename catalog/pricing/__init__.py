"""
Customer price resolution and override administration.
"""

from .overrides import PriceOverrideService, parse_price_type
from .resolver import PriceResolver, apply_override

__all__ = [
    'PriceOverrideService',
    'PriceResolver',
    'apply_override',
    'parse_price_type',
]
