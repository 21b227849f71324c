"""
Tests for craft_calculator/engine/feasibility.py — analyze_potential_crafts().

Covers:
  - Uncraftable recipes are included with their shortfall.
  - Empty inventory analyzes every recipe.
  - Non-empty inventory keeps only recipes using a held material.
  - Zero-line recipes are unbounded, but drop out once an inventory is given.
  - Ordering matches compute_feasibility().
"""

from __future__ import annotations

from craft_calculator.engine.feasibility import analyze_potential_crafts
from craft_calculator.engine.normalize import build_inventory
from craft_calculator.models.recipe import MaterialLine, Recipe


def _inv(**held) -> dict:
    return build_inventory(
        [{"material_name": k.replace("_", " "), "quantity": v} for k, v in held.items()]
    )


def _potion_catalogue():
    recipes = [Recipe(recipe_id=1, name="Potion", quantity_produced=2)]
    lines = [
        MaterialLine(recipe_id=1, material_name="Herb", quantity=2, material_type="drop"),
    ]
    return recipes, lines


class TestAnalyzePotentialCrafts:
    def test_shortfall_reported_for_uncraftable_recipe(self):
        recipes, lines = _potion_catalogue()
        result = analyze_potential_crafts(recipes, lines, _inv(herb=1))

        assert len(result) == 1
        a = result[0]
        assert a.recipe_name == "Potion"
        assert a.can_craft_now is False
        assert a.max_crafts_possible == 0
        assert a.total_items_producible == 0
        herb = a.materials[0]
        assert herb.user_has_quantity == 1
        assert herb.quantity_missing_for_one_craft == 1

    def test_craftable_recipe_has_no_missing(self):
        recipes, lines = _potion_catalogue()
        a = analyze_potential_crafts(recipes, lines, _inv(herb=9))[0]
        assert a.can_craft_now is True
        assert a.max_crafts_possible == 4
        assert a.total_items_producible == 8
        assert a.materials[0].quantity_missing_for_one_craft == 0

    def test_empty_inventory_analyzes_every_recipe(self, sample_catalogue):
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, {}
        )
        assert len(result) == len(sample_catalogue.recipes)
        assert result[0].recipe_name == "Campfire"
        assert result[0].unbounded is True
        assert result[0].can_craft_now is True
        assert all(not a.can_craft_now for a in result[1:])

    def test_missing_equals_requirement_when_nothing_held(self, sample_catalogue):
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, {}
        )
        sword = next(a for a in result if a.recipe_name == "Sword")
        assert [m.quantity_missing_for_one_craft for m in sword.materials] == [4, 2]

    def test_non_overlapping_recipes_excluded(self, sample_catalogue):
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, _inv(herb=1)
        )
        assert [a.recipe_name for a in result] == ["Potion"]

    def test_partial_overlap_included_with_shortfall(self, sample_catalogue):
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, _inv(herb=7)
        )
        potion = result[0]
        assert potion.can_craft_now is False
        missing = {m.material_name: m.quantity_missing_for_one_craft for m in potion.materials}
        assert missing == {"Herb": 0, "Vial": 1}

    def test_zero_held_entry_is_not_overlap(self, sample_catalogue):
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, _inv(herb=0)
        )
        assert result == []

    def test_zero_quantity_line_missing_is_zero(self, sample_catalogue):
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, _inv(gem=1)
        )
        talisman = result[0]
        assert talisman.recipe_name == "Talisman"
        assert talisman.max_crafts_possible == 1
        blessing = talisman.materials[0]
        assert blessing.material_type == "profession"
        assert blessing.quantity_missing_for_one_craft == 0

    def test_ordering_matches_feasibility(self, sample_catalogue):
        inventory = _inv(herb=7, vial=3, iron_ore=4, gem=1, leather=1)
        result = analyze_potential_crafts(
            sample_catalogue.recipes, sample_catalogue.material_lines, inventory
        )
        # Potion 3, Iron Ingot 1, Talisman 1, Sword 0 (leather short)
        assert [a.recipe_name for a in result] == ["Potion", "Iron Ingot", "Talisman", "Sword"]
        assert [a.max_crafts_possible for a in result] == [3, 1, 1, 0]
