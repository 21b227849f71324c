"""
Profitability ranker: NPC-price profit per recipe, catalogue-wide.

    total_material_cost_npc = sum(quantity * default_npc_price)   # non-profession lines
    total_revenue_npc       = npc_sell_price * (quantity_produced or 1)
    profit_npc              = total_revenue_npc - total_material_cost_npc

Profession materials are never bought, so they contribute no cost regardless
of any price stored on the line. Negative profit is a normal result.
"""

from __future__ import annotations

from collections.abc import Sequence

from craft_calculator.engine.normalize import group_lines_by_recipe
from craft_calculator.models.recipe import MaterialLine, Recipe
from craft_calculator.models.results import ProfitResult
from craft_calculator.taxonomy.material_taxonomy import MaterialType


def material_cost_npc(lines: Sequence[MaterialLine]) -> int:
    """Sum of quantity × NPC price over purchasable (non-profession) lines."""
    return sum(
        line.quantity * line.default_npc_price
        for line in lines
        if line.material_type != MaterialType.PROFESSION
    )


def rank_by_profitability(
    recipes: Sequence[Recipe],
    material_lines: Sequence[MaterialLine],
) -> list[ProfitResult]:
    """Rank every recipe by NPC profit, highest first.

    Ties keep catalogue order (the sort is stable).

    Args:
        recipes:        Full recipe list from the catalogue.
        material_lines: Full material-line list from the catalogue.

    Returns:
        One ``ProfitResult`` per recipe.
    """
    lines_by_recipe = group_lines_by_recipe(material_lines)
    results: list[ProfitResult] = []

    for recipe in recipes:
        cost = material_cost_npc(lines_by_recipe.get(recipe.recipe_id, []))
        revenue = recipe.npc_sell_price * (recipe.quantity_produced or 1)
        results.append(
            ProfitResult(
                recipe_id=recipe.recipe_id,
                name=recipe.name,
                quantity_produced=recipe.quantity_produced,
                npc_sell_price_per_unit=recipe.npc_sell_price,
                total_revenue_npc=revenue,
                total_material_cost_npc=cost,
                profit_npc=revenue - cost,
            )
        )

    results.sort(key=lambda r: -r.profit_npc)
    return results
