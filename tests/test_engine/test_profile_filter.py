"""
Tests for craft_calculator/engine/profile_filter.py.

Sample catalogue line types:
  Campfire   -> (none)
  Iron Ingot -> drop
  Potion     -> drop, buy
  Sword      -> profession, buy
  Talisman   -> profession, drop
"""

from __future__ import annotations

import pytest

from craft_calculator.engine.errors import InvalidProfile
from craft_calculator.engine.profile_filter import filter_by_material_profile, matches_profile
from craft_calculator.taxonomy.material_taxonomy import MatchProfile


def _names(snapshot, types, profile):
    result = filter_by_material_profile(
        snapshot.recipes, snapshot.material_lines, types, profile
    )
    return [d.name for d in result]


class TestFilterByMaterialProfile:
    @pytest.mark.parametrize(
        "types, profile, expected",
        [
            (["drop"], "exclusive", ["Iron Ingot"]),
            (["drop", "buy"], "exclusive", ["Iron Ingot", "Potion"]),
            (["profession", "drop", "buy"], "exclusive",
             ["Iron Ingot", "Potion", "Sword", "Talisman"]),
            (["buy"], "contains_any", ["Potion", "Sword"]),
            (["drop", "buy"], "contains_all", ["Potion"]),
            (["profession"], "contains_all", ["Sword", "Talisman"]),
            (["profession"], "not_contains_any", ["Campfire", "Iron Ingot", "Potion"]),
        ],
    )
    def test_profiles(self, sample_catalogue, types, profile, expected):
        assert _names(sample_catalogue, types, profile) == expected

    def test_default_profile_is_exclusive(self, sample_catalogue):
        result = filter_by_material_profile(
            sample_catalogue.recipes, sample_catalogue.material_lines, ["drop"]
        )
        assert [d.name for d in result] == ["Iron Ingot"]

    def test_empty_recipe_only_matches_not_contains_any(self, sample_catalogue):
        for profile in MatchProfile:
            names = _names(sample_catalogue, ["drop", "buy", "profession"], profile)
            assert ("Campfire" in names) == (profile == MatchProfile.NOT_CONTAINS_ANY)

    def test_unknown_token_in_contains_all_matches_nothing(self, sample_catalogue):
        assert _names(sample_catalogue, ["drop", "crafted"], "contains_all") == []

    def test_unknown_token_in_not_contains_any_matches_everything(self, sample_catalogue):
        assert len(_names(sample_catalogue, "crafted", "not_contains_any")) == 5

    def test_comma_string_is_trimmed_and_case_insensitive(self, sample_catalogue):
        assert _names(sample_catalogue, " DROP , Buy ", "Exclusive") == [
            "Iron Ingot", "Potion",
        ]

    def test_result_carries_material_lines(self, sample_catalogue):
        result = filter_by_material_profile(
            sample_catalogue.recipes, sample_catalogue.material_lines, "buy", "contains_any"
        )
        potion = result[0]
        assert [m.material_name for m in potion.materials] == ["Herb", "Vial"]
        assert potion.npc_sell_price == 20

    def test_unknown_profile_raises(self, sample_catalogue):
        with pytest.raises(InvalidProfile, match="Invalid match profile"):
            _names(sample_catalogue, ["drop"], "mostly")

    @pytest.mark.parametrize("types", ["", " , ", [], None])
    def test_empty_types_raise(self, sample_catalogue, types):
        with pytest.raises(InvalidProfile, match="No material type"):
            _names(sample_catalogue, types, "exclusive")

    def test_invalid_profile_is_a_value_error(self, sample_catalogue):
        with pytest.raises(ValueError):
            _names(sample_catalogue, ["drop"], "nope")


class TestMatchesProfile:
    def test_contains_all_allows_extra_line_types(self):
        assert matches_profile(
            ["drop", "buy", "profession"], frozenset({"drop"}), MatchProfile.CONTAINS_ALL
        )

    def test_exclusive_rejects_extra_line_types(self):
        assert not matches_profile(
            ["drop", "buy"], frozenset({"drop"}), MatchProfile.EXCLUSIVE
        )

    def test_repeated_line_types(self):
        assert matches_profile(
            ["drop", "drop"], frozenset({"drop"}), MatchProfile.EXCLUSIVE
        )
