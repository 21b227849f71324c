"""Tests for craft_calculator.reporting.formatters."""

from __future__ import annotations

from craft_calculator.engine.catalogue_view import attach_materials
from craft_calculator.engine.feasibility import analyze_potential_crafts, compute_feasibility
from craft_calculator.engine.normalize import build_inventory
from craft_calculator.engine.profitability import rank_by_profitability
from craft_calculator.engine.usage import summarize_usage
from craft_calculator.reporting.formatters import (
    UNLIMITED,
    format_analysis_report,
    format_craftable_table,
    format_profit_table,
    format_recipe_list,
    format_usage_table,
)


def _inventory(**held):
    return build_inventory([{"material_name": k, "quantity": v} for k, v in held.items()])


def test_craftable_table_shows_unlimited(sample_catalogue) -> None:
    results = compute_feasibility(
        sample_catalogue.recipes, sample_catalogue.material_lines, _inventory(Herb=7, Vial=3)
    )
    out = format_craftable_table(results)
    assert "=== Craftable Now ===" in out
    assert "Campfire" in out
    assert UNLIMITED in out
    assert "Potion" in out
    assert "inf" not in out.lower()


def test_craftable_table_empty() -> None:
    assert "nothing can be crafted" in format_craftable_table([])


def test_analysis_report_marks_status(sample_catalogue) -> None:
    analyses = analyze_potential_crafts(
        sample_catalogue.recipes, sample_catalogue.material_lines, _inventory(Herb=7, Gem=1)
    )
    out = format_analysis_report(analyses)
    assert "[OK] Talisman" in out
    assert "[SHORT] Potion" in out
    assert "missing" in out


def test_analysis_report_empty() -> None:
    assert "no recipe uses" in format_analysis_report([])


def test_profit_table_truncates(sample_catalogue) -> None:
    results = rank_by_profitability(sample_catalogue.recipes, sample_catalogue.material_lines)
    out = format_profit_table(results, top_n=2)
    assert "Sword" in out
    assert "Potion" in out
    assert "Talisman" not in out
    assert "... and 3 more." in out
    assert "+350" in out


def test_profit_table_negative_profit(sample_catalogue) -> None:
    results = rank_by_profitability(sample_catalogue.recipes, sample_catalogue.material_lines)
    assert "-10" in format_profit_table(results)


def test_recipe_list_counts(sample_catalogue) -> None:
    details = attach_materials(sample_catalogue.recipes, sample_catalogue.material_lines)
    out = format_recipe_list(details, title="Catalogue")
    assert "=== Catalogue ===" in out
    assert "(no materials)" in out
    assert "5 recipe(s)." in out


def test_recipe_list_empty() -> None:
    assert "no matching recipes" in format_recipe_list([])


def test_usage_table_price_column(sample_catalogue) -> None:
    out = format_usage_table(summarize_usage(sample_catalogue.material_lines, name_filter="iron"))
    lines = [line for line in out.splitlines() if "Iron" in line]
    ore = next(line for line in lines if "Iron Ore" in line)
    ingot = next(line for line in lines if "Iron Ingot" in line)
    assert ore.rstrip().endswith("20")
    assert ingot.rstrip().endswith("-")
