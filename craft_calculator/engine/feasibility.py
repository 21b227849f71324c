"""
Feasibility calculator: how many times can each recipe be crafted from a
caller's held materials?

Craft-count rule (shared by both operations)
--------------------------------------------
For a recipe with material lines M1..Mn, required q_i and held h_i:

  - n == 0                      -> unbounded (nothing to consume).
  - any h_i < q_i               -> 0 crafts.
  - otherwise                   -> min(floor(h_i / q_i)) over lines with q_i > 0.
  - every line has q_i == 0     -> unbounded (zero consumption never runs out).

Operations
----------
compute_feasibility()      -> craftable-now list (count > 0 or unbounded only).
analyze_potential_crafts() -> every recipe touching the inventory, with the
                              per-line shortfall for one craft.

Both sort unbounded recipes first, then by craft count descending, ties by
recipe name ascending.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from craft_calculator.engine.normalize import group_lines_by_recipe, normalize_key
from craft_calculator.models.recipe import MaterialLine, Recipe
from craft_calculator.models.results import (
    CraftAnalysis,
    CraftCount,
    CraftabilityResult,
    MaterialRequirement,
    MaterialShortfall,
    Quantity,
    craft_sort_key,
)

logger = logging.getLogger(__name__)


def _held(inventory: Mapping[str, Quantity], line: MaterialLine) -> Quantity:
    return inventory.get(normalize_key(line.material_name), 0)


def compute_craft_count(
    lines: Sequence[MaterialLine],
    inventory: Mapping[str, Quantity],
) -> CraftCount:
    """Return the maximum number of crafts ``lines`` allow under ``inventory``."""
    if not lines:
        return CraftCount.unbounded()

    limits: list[int] = []
    for line in lines:
        held = _held(inventory, line)
        if held < line.quantity:
            return CraftCount.bounded(0)
        if line.quantity > 0:
            limits.append(int(held // line.quantity))

    if not limits:
        return CraftCount.unbounded()
    return CraftCount.bounded(min(limits))


def compute_feasibility(
    recipes: Sequence[Recipe],
    material_lines: Sequence[MaterialLine],
    inventory: Mapping[str, Quantity],
) -> list[CraftabilityResult]:
    """List the recipes that can be crafted at least once right now.

    Args:
        recipes:        Full recipe list from the catalogue.
        material_lines: Full material-line list from the catalogue.
        inventory:      Normalized name → held quantity (see ``build_inventory``).

    Returns:
        ``CraftabilityResult`` per craftable recipe; recipes with 0 crafts
        are excluded.
    """
    lines_by_recipe = group_lines_by_recipe(material_lines)
    results: list[CraftabilityResult] = []

    for recipe in recipes:
        lines = lines_by_recipe.get(recipe.recipe_id, [])
        count = compute_craft_count(lines, inventory)
        if not count.is_craftable:
            continue

        if count.is_unbounded:
            total_items = None
        else:
            total_items = count.value * recipe.quantity_produced

        results.append(
            CraftabilityResult(
                recipe_id=recipe.recipe_id,
                recipe_name=recipe.name,
                quantity_produced_per_craft=recipe.quantity_produced,
                max_crafts_possible=count.value,
                unbounded=count.is_unbounded,
                total_items_producible=total_items,
                materials_needed=[
                    MaterialRequirement(
                        material_name=line.material_name,
                        quantity_per_craft=line.quantity,
                        # Unbounded with lines means every line consumes 0.
                        total_quantity_needed_for_max_crafts=(
                            0 if count.is_unbounded else line.quantity * count.value
                        ),
                        user_has_quantity=_held(inventory, line),
                    )
                    for line in lines
                ],
            )
        )

    results.sort(key=lambda r: craft_sort_key(r.craft_count, r.recipe_name))
    logger.debug(
        "Feasibility: %d of %d recipes craftable with %d held materials.",
        len(results), len(recipes), len(inventory),
    )
    return results


def analyze_potential_crafts(
    recipes: Sequence[Recipe],
    material_lines: Sequence[MaterialLine],
    inventory: Mapping[str, Quantity],
) -> list[CraftAnalysis]:
    """Report craftability and shortfalls for recipes touching the inventory.

    With an empty inventory every recipe is analyzed. Otherwise a recipe is
    analyzed only if at least one of its materials is held (quantity > 0);
    recipes without material lines therefore drop out.

    Args:
        recipes:        Full recipe list from the catalogue.
        material_lines: Full material-line list from the catalogue.
        inventory:      Normalized name → held quantity.

    Returns:
        One ``CraftAnalysis`` per analyzed recipe, including uncraftable ones.
    """
    lines_by_recipe = group_lines_by_recipe(material_lines)
    analyses: list[CraftAnalysis] = []

    for recipe in recipes:
        lines = lines_by_recipe.get(recipe.recipe_id, [])
        if inventory and not any(_held(inventory, line) > 0 for line in lines):
            continue

        count = compute_craft_count(lines, inventory)
        total_items = None if count.is_unbounded else count.value * recipe.quantity_produced

        materials = []
        for line in lines:
            held = _held(inventory, line)
            materials.append(
                MaterialShortfall(
                    material_name=line.material_name,
                    material_type=line.material_type,
                    quantity_per_craft=line.quantity,
                    user_has_quantity=held,
                    quantity_missing_for_one_craft=max(0, line.quantity - held),
                )
            )

        analyses.append(
            CraftAnalysis(
                recipe_id=recipe.recipe_id,
                recipe_name=recipe.name,
                quantity_produced_per_craft=recipe.quantity_produced,
                max_crafts_possible=count.value,
                unbounded=count.is_unbounded,
                total_items_producible=total_items,
                can_craft_now=count.is_craftable,
                materials=materials,
            )
        )

    analyses.sort(key=lambda a: craft_sort_key(a.craft_count, a.recipe_name))
    logger.debug(
        "Analysis: %d of %d recipes touch %d held materials.",
        len(analyses), len(recipes), len(inventory),
    )
    return analyses
