"""
Pricing data models.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


def local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class PriceType(str, Enum):
    """How an override value is applied."""
    FIXED = "FIXED"             # value is the price
    PERCENTAGE = "PERCENTAGE"   # value is a discount in percent (10 = 10% off)


@dataclass
class PriceOverride:
    """Customer-specific price for one variant, optionally time-boxed."""
    customer_id: str
    variant_id: str
    price_type: PriceType
    value: Decimal
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    note: Optional[str] = None
    id: str = ""

    def __post_init__(self):
        """Normalize the validity window to naive local time and validate it."""
        self.start_date = local_naive(self.start_date)
        self.end_date = local_naive(self.end_date)
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("Override start_date must not be after end_date")

    def is_active(self, now: datetime) -> bool:
        """Return True if `now` lies inside the validity window (bounds inclusive)."""
        now = local_naive(now)
        if self.start_date and self.start_date > now:
            return False
        if self.end_date and self.end_date < now:
            return False
        return True


@dataclass
class PriceQuote:
    """Resolved price for display: excluding and including VAT."""
    variant_id: str
    price_excl_tax: Decimal
    price_incl_tax: Decimal
