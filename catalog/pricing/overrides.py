"""
Price Override Administration

Create, update, delete and list customer price overrides.

Writes to the same (customer, variant) pair are serialized; writes to
different pairs proceed in parallel.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

from ..models import PriceOverride, PriceType
from ..storage.base import PricingStore, VariantNotFoundError

logger = logging.getLogger(__name__)


def parse_price_type(value) -> PriceType:
    """Accept a PriceType or its name ('FIXED', 'percentage', ...)."""
    if isinstance(value, PriceType):
        return value
    try:
        return PriceType(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Invalid price type: {value!r} (expected FIXED or PERCENTAGE)") from None


def parse_value(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid override value: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Invalid override value: {value!r}")
    return amount


class PriceOverrideService:
    """
    Validated writes for customer price overrides.

    Usage:
        service = PriceOverrideService(store)
        service.set_override("CUST-42", variant_id, "PERCENTAGE", "10")
        service.delete_override("CUST-42", variant_id)
    """

    def __init__(self, store: PricingStore):
        self.store = store
        self._locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, customer_id: str, variant_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault((customer_id, variant_id), threading.Lock())

    def set_override(
        self,
        customer_id: str,
        variant_id: str,
        price_type,
        value,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> PriceOverride:
        """
        Create or replace the override of a (customer, variant) pair.

        Args:
            customer_id: Customer identifier
            variant_id: Variant identifier
            price_type: FIXED or PERCENTAGE (enum or name)
            value: Fixed price, or discount percent (0-100)
            start_date: First moment the override applies (None = always)
            end_date: Last moment the override applies (None = forever)
            note: Free-text comment

        Returns:
            Stored override

        Raises:
            ValueError: On an invalid type, value or window
            VariantNotFoundError: If the variant does not exist
        """
        if not customer_id:
            raise ValueError("customer_id is required")
        price_type = parse_price_type(price_type)
        amount = parse_value(value)
        if amount < 0:
            raise ValueError("Override value must not be negative")
        if price_type is PriceType.PERCENTAGE and amount > 100:
            raise ValueError("Percentage discount must not exceed 100")

        override = PriceOverride(
            customer_id=customer_id,
            variant_id=variant_id,
            price_type=price_type,
            value=amount,
            start_date=start_date,
            end_date=end_date,
            note=note,
        )

        with self._lock_for(customer_id, variant_id):
            if self.store.get_variant(variant_id) is None:
                raise VariantNotFoundError(variant_id)
            stored = self.store.save_override(override)

        logger.info(
            "Override set: customer=%s variant=%s %s %s",
            customer_id, variant_id, price_type.value, amount,
        )
        return stored

    def delete_override(self, customer_id: str, variant_id: str) -> bool:
        """Delete the override of a pair; returns False if there was none."""
        with self._lock_for(customer_id, variant_id):
            deleted = self.store.delete_override(customer_id, variant_id)
        if deleted:
            logger.info("Override deleted: customer=%s variant=%s", customer_id, variant_id)
        return deleted

    def list_overrides(
        self, customer_id: Optional[str] = None, variant_id: Optional[str] = None
    ) -> List[PriceOverride]:
        return self.store.list_overrides(customer_id=customer_id, variant_id=variant_id)
