"""
Catalogue views: recipes joined with their material lines.

``attach_materials()`` is the in-memory join the engine uses to hand back
recipes together with their lines. ``recipes_using_material()`` answers
"which recipes consume X?" with the same case-insensitive name rule as the
rest of the engine.
"""

from __future__ import annotations

from collections.abc import Sequence

from craft_calculator.engine.normalize import group_lines_by_recipe, normalize_key
from craft_calculator.models.recipe import MaterialLine, Recipe, RecipeDetail


def to_detail(recipe: Recipe, lines: Sequence[MaterialLine]) -> RecipeDetail:
    """Build a ``RecipeDetail`` from a recipe and its lines."""
    return RecipeDetail(
        recipe_id=recipe.recipe_id,
        name=recipe.name,
        quantity_produced=recipe.quantity_produced,
        npc_sell_price=recipe.npc_sell_price,
        materials=list(lines),
    )


def attach_materials(
    recipes: Sequence[Recipe],
    material_lines: Sequence[MaterialLine],
) -> list[RecipeDetail]:
    """Join every recipe with its material lines, keeping recipe order."""
    lines_by_recipe = group_lines_by_recipe(material_lines)
    return [to_detail(r, lines_by_recipe.get(r.recipe_id, [])) for r in recipes]


def recipes_using_material(
    recipes: Sequence[Recipe],
    material_lines: Sequence[MaterialLine],
    material_name: str,
) -> list[RecipeDetail]:
    """Return recipes with at least one line for ``material_name`` (exact, case-insensitive).

    A blank ``material_name`` matches nothing.
    """
    wanted = normalize_key(material_name)
    if not wanted:
        return []
    return [
        detail
        for detail in attach_materials(recipes, material_lines)
        if any(normalize_key(m.material_name) == wanted for m in detail.materials)
    ]
