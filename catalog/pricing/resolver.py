"""
Price Resolver

Resolves the effective price a customer pays for a variant.

Rules (first match wins):
1. No customer, or no override for (customer, variant) -> catalog price
2. Override outside its validity window -> catalog price
3. FIXED override -> override value
4. PERCENTAGE override -> catalog price minus value percent

Prices are excluding tax. quote() adds VAT for display.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, Optional

from ..common.config_loader import load_pricing_settings
from ..models import PriceOverride, PriceQuote, PriceType, Variant
from ..storage.base import PricingStore, VariantNotFoundError

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def apply_override(catalog_price: Decimal, override: Optional[PriceOverride], now: datetime) -> Decimal:
    """
    Apply an override to a catalog price.

    Args:
        catalog_price: List price excluding tax
        override: Customer override for the variant, or None
        now: Reference time for the validity window

    Returns:
        Effective price excluding tax
    """
    if override is None or not override.is_active(now):
        return catalog_price
    if override.price_type is PriceType.FIXED:
        return override.value
    return catalog_price * (1 - override.value / 100)


class PriceResolver:
    """
    Read-only customer price resolution.

    Usage:
        resolver = PriceResolver(store)
        price = resolver.resolve("CUST-42", variant_id)
        prices = resolver.resolve_batch("CUST-42", [id1, id2])
    """

    def __init__(
        self,
        store: PricingStore,
        clock: Optional[Callable[[], datetime]] = None,
        vat_rate: Optional[Decimal] = None,
    ):
        """
        Initialize the resolver.

        Args:
            store: Pricing persistence
            clock: Returns the current time (datetime.now if None)
            vat_rate: VAT rate for quotes (config/pricing.yaml if None)
        """
        self.store = store
        self.clock = clock or datetime.now
        if vat_rate is None:
            vat_rate = Decimal(load_pricing_settings()['vat_rate'])
        self.vat_rate = Decimal(vat_rate)

    def resolve(self, customer_id: Optional[str], variant_id: str) -> Decimal:
        """
        Return the price a customer pays for one variant.

        Raises:
            VariantNotFoundError: If the variant does not exist
        """
        variant = self._get_variant(variant_id)
        override = None
        if customer_id:
            override = self.store.get_override(customer_id, variant_id)
        return apply_override(variant.catalog_price, override, self.clock())

    def resolve_batch(self, customer_id: Optional[str], variant_ids: Iterable[str]) -> Dict[str, Decimal]:
        """
        Resolve many variants with one read for variants and one for overrides.

        Args:
            customer_id: Customer, or None for catalog prices
            variant_ids: Variant ids (duplicates allowed)

        Returns:
            Dictionary of variant id -> price

        Raises:
            VariantNotFoundError: If any id does not exist (lists all missing ids)
        """
        ids = list(dict.fromkeys(variant_ids))
        if not ids:
            return {}

        variants = self.store.get_variants(ids)
        missing = [vid for vid in ids if vid not in variants]
        if missing:
            raise VariantNotFoundError(missing)

        overrides: Dict[str, PriceOverride] = {}
        if customer_id:
            overrides = self.store.get_overrides(customer_id, ids)

        now = self.clock()
        return {
            vid: apply_override(variants[vid].catalog_price, overrides.get(vid), now)
            for vid in ids
        }

    def quote(self, customer_id: Optional[str], variant_id: str) -> PriceQuote:
        """
        Return the price excluding and including VAT, rounded to the cent.

        Example:
            >>> resolver.quote(None, variant_id)
            PriceQuote(variant_id='...', price_excl_tax=Decimal('100.00'), price_incl_tax=Decimal('120.00'))
        """
        price = self.resolve(customer_id, variant_id)
        return PriceQuote(
            variant_id=variant_id,
            price_excl_tax=price.quantize(CENT, rounding=ROUND_HALF_UP),
            price_incl_tax=(price * (1 + self.vat_rate)).quantize(CENT, rounding=ROUND_HALF_UP),
        )

    def _get_variant(self, variant_id: str) -> Variant:
        variant = self.store.get_variant(variant_id)
        if variant is None:
            logger.debug("Unknown variant %s", variant_id)
            raise VariantNotFoundError(variant_id)
        return variant
