"""
Tests for derivation rules and the option tables they read.
"""

import pytest

from intake.catalog import EXTRAS_BY_CATEGORY, STYLE_OPTIONS, find_size, find_style
from intake.derivation import (
    DEFAULT_SQM,
    merge_unique,
    sqm_from_size,
    style_to_roof_and_material,
)


class TestSqmFromSize:
    """Floor area is the rounded midpoint of the size range."""

    @pytest.mark.parametrize("size,expected", [
        ("compact", 100),
        ("family", 150),
        ("spacious", 215),
        ("villa", 325),
    ])
    def test_midpoints(self, size, expected):
        assert sqm_from_size(size) == expected

    def test_unknown_category_defaults(self):
        assert sqm_from_size("medium") == DEFAULT_SQM == 150
        assert sqm_from_size("") == 150

    def test_stable(self):
        assert {sqm_from_size("spacious") for _ in range(5)} == {215}


class TestStyleInference:
    """First table match wins, in table order."""

    def test_boswoning(self):
        result = style_to_roof_and_material(["Boswoning"])
        assert result.roof == "sedum"
        assert result.material == "wood"

    def test_table_order_beats_selection_order(self):
        # Notariswoning precedes Strandvilla in the table
        a = style_to_roof_and_material(["Strandvilla", "Notariswoning"])
        b = style_to_roof_and_material(["Notariswoning", "Strandvilla"])
        assert a == b == ("mansard", "brick")

    def test_first_entry_wins_over_everything(self):
        tags = [s.tag for s in reversed(STYLE_OPTIONS)]
        assert style_to_roof_and_material(tags) == ("thatched", "wood")

    def test_no_match_defaults(self):
        assert style_to_roof_and_material([]) == ("pitched", "brick")
        assert style_to_roof_and_material(["Onbekend"]) == ("pitched", "brick")

    def test_every_style_has_inference(self):
        for option in STYLE_OPTIONS:
            roof, material = style_to_roof_and_material([option.tag])
            assert roof == option.inferred_roof
            assert material == option.inferred_material


class TestMergeUnique:

    def test_keeps_order_and_drops_duplicates(self):
        assert merge_unique(["solar", "garage"], ["garage", "pool"]) == ["solar", "garage", "pool"]

    def test_empty(self):
        assert merge_unique([], []) == []


class TestCatalog:

    def test_lookups(self):
        assert find_size("villa").sqm_max == 400
        assert find_size("medium") is None
        assert find_style("Japandi Villa").required_roof is not None
        assert find_style("Dorpswoning").required_roof is None

    def test_extras_categories_disjoint(self):
        seen = set()
        for extras in EXTRAS_BY_CATEGORY.values():
            assert not seen & set(extras)
            seen |= set(extras)
