"""
SQLite schema DDL for the recipe catalogue.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.

Tables (in FK order):
  1. recipes           — one row per craftable item; ``name`` is unique.
  2. recipe_materials  (→ recipes, ON DELETE CASCADE)

``material_type`` is restricted to the ``MaterialType`` values by a CHECK
constraint; the engine never has to defend against other stored types.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

_DDL_RECIPES = """
CREATE TABLE IF NOT EXISTS recipes (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    name              TEXT    NOT NULL UNIQUE,
    quantity_produced INTEGER NOT NULL DEFAULT 1,
    npc_sell_price    INTEGER DEFAULT 0
);
"""

_DDL_RECIPE_MATERIALS = """
CREATE TABLE IF NOT EXISTS recipe_materials (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    recipe_id         INTEGER NOT NULL REFERENCES recipes(id) ON DELETE CASCADE,
    material_name     TEXT    NOT NULL,
    quantity          INTEGER NOT NULL,
    material_type     TEXT    NOT NULL CHECK (material_type IN ('profession', 'drop', 'buy')),
    default_npc_price INTEGER DEFAULT 0
);
"""

_DDL_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_recipe_materials_recipe_id ON recipe_materials (recipe_id);
CREATE INDEX IF NOT EXISTS idx_recipes_name ON recipes (name);
"""

_ALL_DDL: list[str] = [
    _DDL_RECIPES,
    _DDL_RECIPE_MATERIALS,
    _DDL_INDEXES,
]

ALL_TABLE_NAMES = ["recipes", "recipe_materials"]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create all catalogue tables and indexes.

    Args:
        conn: An open ``sqlite3.Connection`` (FK enforcement should be ON).
    """
    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)
    conn.commit()
    logger.debug("Schema applied: %d tables verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on semicolons."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return table names present in the database (sorted, excluding sqlite_*)."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' "
        "AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row[0] for row in rows]
