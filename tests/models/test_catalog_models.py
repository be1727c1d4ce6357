"""Tests for catalog/models"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from catalog.models import (
    ImportRecord,
    ImportResult,
    ImportStatus,
    ParsedVariant,
    PriceOverride,
    PriceType,
    ProductGroup,
)
from catalog.models.pricing import local_naive


class TestParsedVariant:
    def test_required_fields(self):
        with pytest.raises(ValueError, match="SKU"):
            ParsedVariant(family="ENPHASE", sku="", designation="IQ7")
        with pytest.raises(ValueError, match="family"):
            ParsedVariant(family="", sku="A1", designation="IQ7")
        with pytest.raises(ValueError, match="designation"):
            ParsedVariant(family="ENPHASE", sku="A1", designation="")

    def test_negative_stock_clamped(self):
        row = ParsedVariant(family="ENPHASE", sku="A1", designation="IQ7", stock=Decimal("-3"))
        assert row.stock == Decimal(0)

    @pytest.mark.parametrize("stock,price,active", [
        ("0", "0", False),
        ("5", "0", True),
        ("0", "10", True),
        ("-2", "0", False),
    ])
    def test_active_flag(self, stock, price, active):
        row = ParsedVariant(
            family="ENPHASE", sku="A1", designation="IQ7",
            stock=Decimal(stock), price=Decimal(price),
        )
        assert row.active is active


class TestProductGroup:
    def test_identity(self):
        group = ProductGroup(
            base_name="BALLON NUOS", group_key="ARISTON_BALLON_NUOS", family="BALLONS",
            brand_name="Ariston", category_name="Pompes à chaleur",
        )
        assert group.identity == ("ARISTON_BALLON_NUOS", "Pompes à chaleur")
        assert group.variants == []


class TestImportResult:
    def test_success_iff_no_errors(self):
        assert ImportResult().success is True
        assert ImportResult(errors=["Variant error X: boom"]).success is False

    def test_failed(self):
        result = ImportResult.failed("Import aborted: disk")
        assert result.success is False
        assert result.errors == ["Import aborted: disk"]
        assert result.rows_processed == 0
        assert result.products_created == 0
        assert result.variants_created == 0

    def test_to_dict(self):
        data = ImportResult(rows_processed=3, products_created=1, variants_created=3).to_dict()
        assert data["success"] is True
        assert data["rows_processed"] == 3
        assert data["errors"] == []


class TestImportRecord:
    def test_complete_success(self):
        record = ImportRecord(filename="export.csv")
        assert record.status is ImportStatus.PROCESSING
        record.complete(ImportResult(rows_processed=10, products_created=4, variants_created=10))
        assert record.status is ImportStatus.COMPLETED
        assert record.variants_created == 10
        assert record.completed_at is not None

    def test_complete_failure_keeps_errors(self):
        record = ImportRecord(filename="export.csv")
        record.complete(ImportResult(errors=["a", "b"]))
        assert record.status is ImportStatus.FAILED
        assert record.errors == "a\nb"


class TestPriceOverride:
    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            PriceOverride(
                customer_id="C1", variant_id="V1", price_type=PriceType.FIXED,
                value=Decimal("10"), start_date=datetime(2026, 2, 1), end_date=datetime(2026, 1, 1),
            )

    def test_window_bounds_inclusive(self):
        start, end = datetime(2026, 1, 1), datetime(2026, 1, 31)
        override = PriceOverride(
            customer_id="C1", variant_id="V1", price_type=PriceType.PERCENTAGE,
            value=Decimal("10"), start_date=start, end_date=end,
        )
        assert override.is_active(start)
        assert override.is_active(end)
        assert not override.is_active(datetime(2025, 12, 31, 23, 59))
        assert not override.is_active(datetime(2026, 1, 31, 0, 0, 1))

    def test_open_window_always_active(self):
        override = PriceOverride(
            customer_id="C1", variant_id="V1", price_type=PriceType.FIXED, value=Decimal("1"),
        )
        assert override.is_active(datetime(2000, 1, 1))

    def test_aware_dates_normalized(self):
        end = datetime(2026, 1, 31, 12, tzinfo=timezone.utc)
        override = PriceOverride(
            customer_id="C1", variant_id="V1", price_type=PriceType.FIXED,
            value=Decimal("10"), start_date=datetime(2026, 1, 1), end_date=end,
        )
        assert override.end_date.tzinfo is None
        assert override.end_date == end.astimezone().replace(tzinfo=None)
        assert override.is_active(datetime(2026, 1, 15, tzinfo=timezone.utc))

    def test_local_naive(self):
        naive = datetime(2026, 1, 1)
        assert local_naive(naive) is naive
        assert local_naive(None) is None
