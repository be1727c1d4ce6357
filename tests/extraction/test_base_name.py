"""Tests for catalog/extraction/base_name.py"""

from pathlib import Path

import pytest
import yaml

from catalog.extraction.base_name import BaseNameReducer

GOLDEN_FILE = Path(__file__).parent.parent / "fixtures" / "designations_golden.yaml"


def _golden_cases():
    with open(GOLDEN_FILE, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return [(case["designation"], case["base_name"]) for case in data["cases"]]


@pytest.fixture(scope="module")
def reducer():
    return BaseNameReducer()


class TestGoldenCorpus:
    def test_golden_file_matches_rule_version(self, reducer):
        with open(GOLDEN_FILE, "r", encoding="utf-8") as f:
            assert yaml.safe_load(f)["version"] == reducer.version

    @pytest.mark.parametrize("designation,expected", _golden_cases())
    def test_reduce(self, reducer, designation, expected):
        assert reducer.reduce(designation) == expected


class TestReduce:
    def test_output_is_upper_case(self, reducer):
        assert reducer.reduce("ballon nuos 200l") == "BALLON NUOS"

    def test_variants_share_base_name(self, reducer):
        names = {
            reducer.reduce("Micro-onduleur IQ7 5000W (Ref ABC1234567)"),
            reducer.reduce("Micro-onduleur IQ7 7000W"),
        }
        assert names == {"MICRO-ONDULEUR IQ7"}

    def test_word_starting_with_dash_not_a_reference(self, reducer):
        assert reducer.reduce("Passerelle -ONDULEUR ENVOY") == "PASSERELLE -ONDULEUR ENVOY"

    def test_short_result_falls_back(self, reducer):
        # Every token is variable: keep the designation minus its DPR suffix
        assert reducer.reduce("200L -DPR4") == "200L"

    def test_idempotent(self, reducer):
        once = reducer.reduce("Onduleur HUAWEI SUN2000-10KTL-M1 TRI")
        assert reducer.reduce(once) == once


class TestCustomRules:
    def test_rules_applied_in_order(self):
        reducer = BaseNameReducer({
            "version": 99,
            "min_length": 1,
            "rules": [
                {"name": "digits", "pattern": r"\d+"},
                {"name": "trailing_x", "pattern": r"X$"},
            ],
        })
        assert reducer.reduce("Pompe X 12X") == "POMPE X"
        assert reducer.version == 99

    def test_no_fallback_pattern(self):
        reducer = BaseNameReducer({
            "version": 1,
            "rules": [{"name": "all", "pattern": r".+"}],
        })
        assert reducer.reduce("Ballon") == "BALLON"
