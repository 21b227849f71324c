"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept engine result models and return plain multi-line
strings suitable for ``typer.echo()``. No third-party dependencies.

Unbounded craft counts are shown as ``"unlimited"`` rather than a number::

    Recipe                          Crafts   Items
    ----------------------------------------------
    Campfire                     unlimited       -
    Potion                               3       3
"""

from __future__ import annotations

from collections.abc import Sequence

from craft_calculator.models.recipe import RecipeDetail
from craft_calculator.models.results import (
    CraftAnalysis,
    CraftabilityResult,
    ProfitResult,
    UsageSummary,
)

UNLIMITED = "unlimited"


def _crafts_str(max_crafts: int | None, unbounded: bool) -> str:
    return UNLIMITED if unbounded else str(max_crafts if max_crafts is not None else 0)


def _qty_str(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _empty(lines: list[str], hint: str) -> str:
    lines.append("")
    lines.append(f"  ({hint})")
    return "\n".join(lines)


# ── Feasibility ───────────────────────────────────────────────────────────────


def format_craftable_table(results: Sequence[CraftabilityResult]) -> str:
    """Recipes craftable now, with the held/needed breakdown per material."""
    lines: list[str] = ["", "=== Craftable Now ==="]
    if not results:
        return _empty(lines, "nothing can be crafted with the given materials")

    header = f"  {'Recipe':<32}  {'Crafts':>9}  {'Items':>7}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for r in results:
        items = "-" if r.total_items_producible is None else str(r.total_items_producible)
        lines.append(
            f"  {r.recipe_name[:32]:<32}  "
            f"{_crafts_str(r.max_crafts_possible, r.unbounded):>9}  {items:>7}"
        )
        for m in r.materials_needed:
            lines.append(
                f"      {m.material_name[:28]:<28}  per craft {m.quantity_per_craft:>5}  "
                f"uses {m.total_quantity_needed_for_max_crafts:>6}  "
                f"have {_qty_str(m.user_has_quantity):>6}"
            )
    return "\n".join(lines)


def format_analysis_report(analyses: Sequence[CraftAnalysis]) -> str:
    """Every analyzed recipe with what is missing for a single craft."""
    lines: list[str] = ["", "=== Craft Analysis ==="]
    if not analyses:
        return _empty(lines, "no recipe uses any of the given materials")

    for a in analyses:
        status = "OK" if a.can_craft_now else "SHORT"
        lines.append("")
        lines.append(
            f"  [{status}] {a.recipe_name}  "
            f"crafts={_crafts_str(a.max_crafts_possible, a.unbounded)}"
        )
        for m in a.materials:
            missing = _qty_str(m.quantity_missing_for_one_craft)
            lines.append(
                f"      {m.material_name[:28]:<28}  {m.material_type.value:<10}  "
                f"need {m.quantity_per_craft:>5}  have {_qty_str(m.user_has_quantity):>6}  "
                f"missing {missing:>5}"
            )
    return "\n".join(lines)


# ── Profitability ─────────────────────────────────────────────────────────────


def format_profit_table(results: Sequence[ProfitResult], top_n: int | None = None) -> str:
    """NPC profit ranking (highest first)."""
    lines: list[str] = ["", "=== NPC Profitability ==="]
    if not results:
        return _empty(lines, "catalogue is empty; run 'import-recipes' first")

    shown = results[:top_n] if top_n else results
    header = (
        f"  {'#':>3}  {'Recipe':<32}  {'Qty':>5}  {'Revenue':>9}  "
        f"{'Cost':>9}  {'Profit':>9}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, r in enumerate(shown, start=1):
        lines.append(
            f"  {rank:>3}  {r.name[:32]:<32}  {r.quantity_produced:>5}  "
            f"{r.total_revenue_npc:>9}  {r.total_material_cost_npc:>9}  {r.profit_npc:>+9}"
        )
    if len(shown) < len(results):
        lines.append(f"  ... and {len(results) - len(shown)} more.")
    return "\n".join(lines)


# ── Catalogue ─────────────────────────────────────────────────────────────────


def format_recipe_detail(detail: RecipeDetail) -> str:
    """One recipe with its materials."""
    lines = [
        f"  {detail.name}  (id={detail.recipe_id}, "
        f"produces {detail.quantity_produced}, sells {detail.npc_sell_price}/unit)"
    ]
    if not detail.materials:
        lines.append("      (no materials)")
    for m in detail.materials:
        lines.append(
            f"      {m.material_name[:28]:<28}  x{m.quantity:<5}  "
            f"{m.material_type.value:<10}  npc {m.default_npc_price}"
        )
    return "\n".join(lines)


def format_recipe_list(details: Sequence[RecipeDetail], title: str = "Recipes") -> str:
    """A list of recipes with their materials."""
    lines: list[str] = ["", f"=== {title} ==="]
    if not details:
        return _empty(lines, "no matching recipes")
    for d in details:
        lines.append(format_recipe_detail(d))
    lines.append("")
    lines.append(f"  {len(details)} recipe(s).")
    return "\n".join(lines)


# ── Usage ─────────────────────────────────────────────────────────────────────


def format_usage_table(summaries: Sequence[UsageSummary]) -> str:
    """Material demand across recipes. The price column is a heuristic reference."""
    lines: list[str] = ["", "=== Material Usage ==="]
    if not summaries:
        return _empty(lines, "no material matches the filters")

    header = (
        f"  {'Material':<32}  {'Type':<10}  {'Recipes':>7}  {'Total qty':>9}  {'Ref. NPC':>8}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for s in summaries:
        price = "-" if s.reference_npc_price is None else str(s.reference_npc_price)
        lines.append(
            f"  {s.material_name[:32]:<32}  {s.material_type.value:<10}  "
            f"{s.used_in_recipes_count:>7}  {s.total_quantity_needed:>9}  {price:>8}"
        )
    return "\n".join(lines)
