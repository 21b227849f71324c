"""
Shared pytest fixtures for the Craft Calculator test suite.

Provides:
  - ``in_memory_db``: A fresh in-memory SQLite connection with the catalogue
    schema applied. Created anew for each test that requests it.
  - ``sample_catalogue``: A small recipe/material-line snapshot covering
    every material type, a recipe with no materials and a recipe with a
    zero-quantity line.
"""

from __future__ import annotations

import sqlite3
from typing import Generator

import pytest

from craft_calculator.db.repositories.recipe_repo import CatalogueSnapshot
from craft_calculator.db.schema import apply_schema
from craft_calculator.models.recipe import MaterialLine, Recipe, RecipeDetail


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the schema applied.

    Foreign key enforcement is ON so cascades behave as in production.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Sample domain objects ─────────────────────────────────────────────────────

def _line(
    recipe_id: int,
    name: str,
    quantity: int,
    material_type: str = "drop",
    price: int = 0,
) -> MaterialLine:
    return MaterialLine(
        recipe_id=recipe_id,
        material_name=name,
        quantity=quantity,
        material_type=material_type,
        default_npc_price=price,
    )


@pytest.fixture
def sample_catalogue() -> CatalogueSnapshot:
    """Five recipes in name order, as ``list_recipes()`` would return them.

    Campfire (5)   — no materials.
    Iron Ingot (3) — Iron Ore x3 (drop, 20).
    Potion (1)     — Herb x2 (drop, 15), Vial x1 (buy, 10); produces 5, sells 20.
    Sword (2)      — Iron Ingot x4 (profession), Leather x2 (buy, 25); sells 400.
    Talisman (4)   — Blessing x0 (profession), Gem x1 (drop, 100); sells 90.
    """
    recipes = [
        Recipe(recipe_id=5, name="Campfire", quantity_produced=1, npc_sell_price=0),
        Recipe(recipe_id=3, name="Iron Ingot", quantity_produced=1, npc_sell_price=80),
        Recipe(recipe_id=1, name="Potion", quantity_produced=5, npc_sell_price=20),
        Recipe(recipe_id=2, name="Sword", quantity_produced=1, npc_sell_price=400),
        Recipe(recipe_id=4, name="Talisman", quantity_produced=1, npc_sell_price=90),
    ]
    lines = [
        _line(1, "Herb", 2, "drop", 15),
        _line(1, "Vial", 1, "buy", 10),
        _line(2, "Iron Ingot", 4, "profession"),
        _line(2, "Leather", 2, "buy", 25),
        _line(3, "Iron Ore", 3, "drop", 20),
        _line(4, "Blessing", 0, "profession"),
        _line(4, "Gem", 1, "drop", 100),
    ]
    return CatalogueSnapshot(recipes=recipes, material_lines=lines)


@pytest.fixture
def sample_detail() -> RecipeDetail:
    """An unsaved ``RecipeDetail`` for repository tests."""
    return RecipeDetail(
        name="100 Nightmare Medium Potion",
        quantity_produced=100,
        npc_sell_price=45,
        materials=[
            MaterialLine(material_name="Nightmare Herb", quantity=20,
                         material_type="drop", default_npc_price=60),
            MaterialLine(material_name="Empty Vial", quantity=100,
                         material_type="buy", default_npc_price=10),
            MaterialLine(material_name="Essence of Dreams", quantity=2,
                         material_type="profession"),
        ],
    )
