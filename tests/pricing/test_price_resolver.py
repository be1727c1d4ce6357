"""Tests for catalog/pricing/resolver.py"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from catalog.models import PriceOverride, PriceType
from catalog.pricing.resolver import PriceResolver, apply_override
from catalog.storage import InMemoryStore, VariantNotFoundError


class CountingStore(InMemoryStore):
    """In-memory store counting pricing reads."""

    def __init__(self):
        super().__init__()
        self.reads = 0

    def get_variant(self, variant_id):
        self.reads += 1
        return super().get_variant(variant_id)

    def get_variants(self, variant_ids):
        self.reads += 1
        return super().get_variants(variant_ids)

    def get_override(self, customer_id, variant_id):
        self.reads += 1
        return super().get_override(customer_id, variant_id)

    def get_overrides(self, customer_id, variant_ids):
        self.reads += 1
        return super().get_overrides(customer_id, variant_ids)


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def resolver(store, fixed_now):
    return PriceResolver(store, clock=lambda: fixed_now, vat_rate=Decimal("0.20"))


@pytest.fixture
def variant(store, add_variant):
    return add_variant(store, sku="IQ7", price="100.00")


def _override(variant_id, price_type, value, customer_id="CUST-42", **window):
    return PriceOverride(
        customer_id=customer_id, variant_id=variant_id,
        price_type=price_type, value=Decimal(value), **window,
    )


class TestResolve:
    def test_no_customer(self, resolver, variant):
        assert resolver.resolve(None, variant.id) == Decimal("100.00")

    def test_no_override(self, resolver, variant):
        assert resolver.resolve("CUST-42", variant.id) == Decimal("100.00")

    def test_fixed(self, resolver, store, variant):
        store.save_override(_override(variant.id, PriceType.FIXED, "99.90"))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("99.90")

    def test_percentage(self, resolver, store, variant):
        store.save_override(_override(variant.id, PriceType.PERCENTAGE, "10"))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("90.00")

    def test_other_customer_unaffected(self, resolver, store, variant):
        store.save_override(_override(variant.id, PriceType.FIXED, "50"))
        assert resolver.resolve("CUST-7", variant.id) == Decimal("100.00")

    def test_expired(self, resolver, store, variant, fixed_now):
        store.save_override(_override(
            variant.id, PriceType.FIXED, "50",
            start_date=fixed_now - timedelta(days=30), end_date=fixed_now - timedelta(days=1),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("100.00")

    def test_future_start(self, resolver, store, variant, fixed_now):
        store.save_override(_override(
            variant.id, PriceType.PERCENTAGE, "20", start_date=fixed_now + timedelta(days=1),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("100.00")

    def test_window_bounds_inclusive(self, resolver, store, variant, fixed_now):
        store.save_override(_override(
            variant.id, PriceType.FIXED, "80", start_date=fixed_now, end_date=fixed_now,
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("80")

    def test_open_ended_window(self, resolver, store, variant, fixed_now):
        store.save_override(_override(
            variant.id, PriceType.FIXED, "70", start_date=fixed_now - timedelta(days=365),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("70")

    def test_full_discount(self, resolver, store, variant):
        store.save_override(_override(variant.id, PriceType.PERCENTAGE, "100"))
        assert resolver.resolve("CUST-42", variant.id) == Decimal(0)

    def test_unknown_variant(self, resolver):
        with pytest.raises(VariantNotFoundError) as exc_info:
            resolver.resolve("CUST-42", "missing")
        assert exc_info.value.variant_ids == ["missing"]

    def test_clock_is_read_per_call(self, store, variant):
        now = [datetime(2026, 1, 1)]
        resolver = PriceResolver(store, clock=lambda: now[0], vat_rate=Decimal("0.20"))
        store.save_override(_override(
            variant.id, PriceType.FIXED, "60", end_date=datetime(2026, 1, 31),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("60")
        now[0] = datetime(2026, 2, 1)
        assert resolver.resolve("CUST-42", variant.id) == Decimal("100.00")


    def test_aware_window_dates(self, resolver, store, variant):
        store.save_override(_override(
            variant.id, PriceType.FIXED, "50", end_date=datetime(2026, 12, 31, tzinfo=timezone.utc),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("50")

    def test_expired_aware_end_date(self, resolver, store, variant):
        store.save_override(_override(
            variant.id, PriceType.FIXED, "50", end_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("100.00")

    def test_aware_clock(self, store, variant):
        resolver = PriceResolver(
            store, clock=lambda: datetime(2026, 6, 15, 12, tzinfo=timezone.utc), vat_rate=Decimal("0.20"),
        )
        store.save_override(_override(
            variant.id, PriceType.PERCENTAGE, "10", start_date=datetime(2026, 1, 1), end_date=datetime(2026, 12, 31),
        ))
        assert resolver.resolve("CUST-42", variant.id) == Decimal("90.00")


class TestResolveBatch:
    @pytest.fixture
    def catalog(self, store, add_variant, fixed_now):
        variants = [add_variant(store, sku=f"SKU-{n}", price=f"{n}00.00") for n in range(1, 6)]
        store.save_override(_override(variants[0].id, PriceType.FIXED, "99.90"))
        store.save_override(_override(variants[1].id, PriceType.PERCENTAGE, "10"))
        store.save_override(_override(
            variants[2].id, PriceType.FIXED, "1", end_date=fixed_now - timedelta(seconds=1),
        ))
        store.save_override(_override(variants[3].id, PriceType.FIXED, "2", customer_id="CUST-7"))
        return variants

    @pytest.mark.parametrize("customer_id", ["CUST-42", "CUST-7", None])
    def test_matches_single_resolution(self, resolver, catalog, customer_id):
        ids = [v.id for v in catalog]
        batch = resolver.resolve_batch(customer_id, ids)
        assert batch == {vid: resolver.resolve(customer_id, vid) for vid in ids}

    def test_expected_prices(self, resolver, catalog):
        batch = resolver.resolve_batch("CUST-42", [v.id for v in catalog])
        assert list(batch.values()) == [
            Decimal("99.90"), Decimal("180.00"), Decimal("300.00"), Decimal("400.00"), Decimal("500.00"),
        ]

    def test_two_reads(self, resolver, store, catalog):
        store.reads = 0
        resolver.resolve_batch("CUST-42", [v.id for v in catalog])
        assert store.reads == 2

    def test_one_read_without_customer(self, resolver, store, catalog):
        store.reads = 0
        resolver.resolve_batch(None, [v.id for v in catalog])
        assert store.reads == 1

    def test_empty_ids_no_read(self, resolver, store):
        assert resolver.resolve_batch("CUST-42", []) == {}
        assert store.reads == 0

    def test_duplicate_ids(self, resolver, catalog):
        batch = resolver.resolve_batch("CUST-42", [catalog[0].id, catalog[0].id])
        assert batch == {catalog[0].id: Decimal("99.90")}

    def test_unknown_ids_raise(self, resolver, catalog):
        with pytest.raises(VariantNotFoundError) as exc_info:
            resolver.resolve_batch("CUST-42", [catalog[0].id, "missing-1", "missing-2"])
        assert exc_info.value.variant_ids == ["missing-1", "missing-2"]


class TestQuote:
    def test_adds_vat(self, resolver, variant):
        quote = resolver.quote(None, variant.id)
        assert quote.price_excl_tax == Decimal("100.00")
        assert quote.price_incl_tax == Decimal("120.00")

    def test_rounded_to_cent(self, resolver, store, variant):
        store.save_override(_override(variant.id, PriceType.FIXED, "99.99"))
        quote = resolver.quote("CUST-42", variant.id)
        # 99.99 * 1.2 = 119.988
        assert str(quote.price_incl_tax) == "119.99"

    def test_vat_rate_from_config(self, store):
        assert PriceResolver(store).vat_rate == Decimal("0.20")


class TestApplyOverride:
    def test_none(self, fixed_now):
        assert apply_override(Decimal("10"), None, fixed_now) == Decimal("10")

    def test_percentage_of_zero_price(self, fixed_now):
        override = _override("V", PriceType.PERCENTAGE, "25")
        assert apply_override(Decimal("0"), override, fixed_now) == Decimal("0")
