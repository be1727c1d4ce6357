"""Tests for catalog/importer/grouping.py"""

import logging
from decimal import Decimal

from catalog.models import ParsedVariant


def _row(sku, designation, family="ENPHASE"):
    return ParsedVariant(family=family, sku=sku, designation=designation, price=Decimal("10"))


class TestGroup:
    def test_fixture_groups(self, grouper, row_parser, supplier_export):
        groups = grouper.group(row_parser.parse(supplier_export))
        summary = {key: len(group.variants) for key, group in groups.items()}
        assert summary == {
            ("ENPHASE_MICRO_ONDULEUR_IQ7", "Solaire"): 2,
            ("HUAWEI_ONDULEUR_HUAWEI_SUN2000_M1_TRI", "Solaire"): 1,
            ("ARISTON_BALLON_THERMODYNAMIQUE_NUOS", "Pompes à chaleur"): 2,
            ("HUAWEI_BATTERIE_HUAWEI_LUNA2000", "Stockage"): 1,
            ("CABLE_SOLAIRE", "Autres"): 1,
        }

    def test_first_row_sets_group_fields(self, grouper):
        groups = grouper.group([
            _row("A", "Micro-onduleur IQ7 5000W (Ref ABC1234567)"),
            _row("B", "Micro onduleur IQ7 7000W"),
        ])
        group = groups[("ENPHASE_MICRO_ONDULEUR_IQ7", "Solaire")]
        assert group.base_name == "MICRO-ONDULEUR IQ7"
        assert group.brand_name == "Enphase"
        assert group.family == "ENPHASE"
        assert [v.sku for v in group.variants] == ["A", "B"]

    def test_insertion_order(self, grouper):
        groups = grouper.group([
            _row("A", "Ballon NUOS 200L", family="BALLONS"),
            _row("B", "Micro-onduleur IQ7 5000W"),
            _row("C", "Ballon NUOS 300L", family="BALLONS"),
        ])
        assert [g.base_name for g in groups.values()] == ["BALLON NUOS", "MICRO-ONDULEUR IQ7"]

    def test_unmapped_family_uses_default_category(self, grouper):
        assert grouper.category_for("INCONNUE") == "Autres"

    def test_same_key_two_categories_warns(self, grouper, caplog):
        with caplog.at_level(logging.WARNING, logger="catalog.importer.grouping"):
            groups = grouper.group([
                _row("A", "Batterie HUAWEI LUNA2000 5KWH", family="STOCKAGE HUAWEI"),
                _row("B", "Batterie HUAWEI LUNA2000 10KWH", family="ONDULEURS HUAWEI"),
            ])
        assert len(groups) == 2
        assert "appears in categories" in caplog.text

    def test_empty(self, grouper):
        assert grouper.group([]) == {}
