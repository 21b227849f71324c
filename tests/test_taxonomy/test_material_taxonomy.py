"""Tests for the material taxonomy enums."""

from __future__ import annotations

import pytest

from craft_calculator.taxonomy.material_taxonomy import (
    ALL_MATCH_PROFILES,
    ALL_MATERIAL_TYPES,
    MatchProfile,
    MaterialType,
)


def test_material_type_values():
    assert ALL_MATERIAL_TYPES == frozenset({"profession", "drop", "buy"})


def test_match_profile_values_in_declaration_order():
    assert ALL_MATCH_PROFILES == (
        "exclusive", "contains_any", "contains_all", "not_contains_any",
    )


def test_enums_compare_as_strings():
    assert MaterialType.DROP == "drop"
    assert f"{MatchProfile.EXCLUSIVE}" == "exclusive"


def test_unknown_value_rejected():
    with pytest.raises(ValueError):
        MaterialType("crafted")
