"""
Repository for recipes and their material lines.

A recipe and its lines are always written together: ``insert`` adds both,
``update`` replaces the recipe fields and ALL of its lines, ``delete`` relies
on ``ON DELETE CASCADE`` to remove the lines. Run each call inside one
``get_connection()`` block so a failure rolls back the whole recipe.

The engine's only read contract is ``list_recipes()`` + ``list_material_lines()``
(bundled by ``load_snapshot()``); all filtering happens in the engine.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from craft_calculator.db.repositories.base import BaseRepository
from craft_calculator.engine.catalogue_view import attach_materials
from craft_calculator.models.recipe import MaterialLine, Recipe, RecipeDetail

logger = logging.getLogger(__name__)

_INSERT_MATERIAL = """
    INSERT INTO recipe_materials (
        recipe_id, material_name, quantity, material_type, default_npc_price
    ) VALUES (?, ?, ?, ?, ?);
"""


@dataclass(frozen=True)
class CatalogueSnapshot:
    """Everything the engine needs: all recipes and all material lines."""

    recipes: list[Recipe]
    material_lines: list[MaterialLine]


class RecipeRepository(BaseRepository):
    """Read/write access to the ``recipes`` and ``recipe_materials`` tables."""

    # ── Writes ────────────────────────────────────────────────────────────────

    def insert(self, detail: RecipeDetail) -> int:
        """Insert a recipe and its material lines.

        Args:
            detail: Recipe to persist; ``recipe_id`` is ignored.

        Returns:
            The newly assigned recipe id.

        Raises:
            sqlite3.IntegrityError: If a recipe with the same name exists.
        """
        self.execute(
            "INSERT INTO recipes (name, quantity_produced, npc_sell_price) VALUES (?, ?, ?);",
            (detail.name, detail.quantity_produced, detail.npc_sell_price),
        )
        recipe_id = self.last_insert_rowid()
        self._insert_materials(recipe_id, detail.materials)
        logger.debug("Inserted recipe %r (id=%d, %d materials).",
                     detail.name, recipe_id, len(detail.materials))
        return recipe_id

    def update(self, recipe_id: int, detail: RecipeDetail) -> bool:
        """Replace a recipe's fields and all of its material lines.

        Returns:
            ``False`` if no recipe has ``recipe_id`` (nothing is written).
        """
        cur = self.execute(
            """
            UPDATE recipes SET name = ?, quantity_produced = ?, npc_sell_price = ?
            WHERE id = ?;
            """,
            (detail.name, detail.quantity_produced, detail.npc_sell_price, recipe_id),
        )
        if cur.rowcount == 0:
            return False

        self.execute("DELETE FROM recipe_materials WHERE recipe_id = ?;", (recipe_id,))
        self._insert_materials(recipe_id, detail.materials)
        return True

    def upsert_by_name(self, detail: RecipeDetail) -> int:
        """Insert ``detail``, or replace the existing recipe with the same name.

        Returns:
            The recipe id (existing or new).
        """
        existing = self.get_by_name(detail.name)
        if existing is None or existing.recipe_id is None:
            return self.insert(detail)
        self.update(existing.recipe_id, detail)
        return existing.recipe_id

    def delete(self, recipe_id: int) -> bool:
        """Delete a recipe (its material lines cascade).

        Returns:
            ``False`` if no recipe has ``recipe_id``.
        """
        cur = self.execute("DELETE FROM recipes WHERE id = ?;", (recipe_id,))
        return cur.rowcount > 0

    def _insert_materials(self, recipe_id: int, materials: list[MaterialLine]) -> None:
        if not materials:
            return
        self.executemany(
            _INSERT_MATERIAL,
            [
                (
                    recipe_id,
                    m.material_name,
                    m.quantity,
                    m.material_type.value,
                    m.default_npc_price,
                )
                for m in materials
            ],
        )

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get_by_id(self, recipe_id: int) -> Optional[RecipeDetail]:
        """Fetch a recipe with its material lines, or ``None``."""
        row = self.fetchone(
            "SELECT id, name, quantity_produced, npc_sell_price FROM recipes WHERE id = ?;",
            (recipe_id,),
        )
        if row is None:
            return None
        rows = self.fetchall(
            "SELECT * FROM recipe_materials WHERE recipe_id = ? ORDER BY id;",
            (recipe_id,),
        )
        return RecipeDetail(
            **_row_to_recipe(row).model_dump(),
            materials=[_row_to_material(r) for r in rows],
        )

    def get_by_name(self, name: str) -> Optional[Recipe]:
        """Fetch a recipe by exact (case-sensitive) name, or ``None``."""
        row = self.fetchone(
            "SELECT id, name, quantity_produced, npc_sell_price FROM recipes WHERE name = ?;",
            (name,),
        )
        return _row_to_recipe(row) if row else None

    def get_sell_price(self, name: str) -> Optional[int]:
        """Return the NPC sell price of the recipe named ``name``, or ``None``."""
        recipe = self.get_by_name(name)
        return recipe.npc_sell_price if recipe else None

    def list_recipes(self) -> list[Recipe]:
        """Return every recipe ordered by name."""
        rows = self.fetchall(
            "SELECT id, name, quantity_produced, npc_sell_price FROM recipes ORDER BY name ASC;"
        )
        return [_row_to_recipe(r) for r in rows]

    def list_material_lines(self) -> list[MaterialLine]:
        """Return every material line ordered by recipe, then insertion order."""
        rows = self.fetchall("SELECT * FROM recipe_materials ORDER BY recipe_id, id;")
        return [_row_to_material(r) for r in rows]

    def list_details(self) -> list[RecipeDetail]:
        """Return every recipe with its material lines, ordered by name."""
        return attach_materials(self.list_recipes(), self.list_material_lines())

    def count(self) -> int:
        """Return total number of recipes."""
        row = self.fetchone("SELECT COUNT(*) AS n FROM recipes;")
        assert row is not None
        return int(row["n"])


def load_snapshot(conn: sqlite3.Connection) -> CatalogueSnapshot:
    """Read the full catalogue in one go for the engine."""
    repo = RecipeRepository(conn)
    snapshot = CatalogueSnapshot(
        recipes=repo.list_recipes(),
        material_lines=repo.list_material_lines(),
    )
    logger.info(
        "Loaded catalogue: %d recipes, %d material lines.",
        len(snapshot.recipes), len(snapshot.material_lines),
    )
    return snapshot


# ── Private helpers ────────────────────────────────────────────────────────────

def _row_to_recipe(row: sqlite3.Row) -> Recipe:
    return Recipe(
        recipe_id=row["id"],
        name=row["name"],
        quantity_produced=row["quantity_produced"],
        npc_sell_price=row["npc_sell_price"] or 0,
    )


def _row_to_material(row: sqlite3.Row) -> MaterialLine:
    return MaterialLine(
        line_id=row["id"],
        recipe_id=row["recipe_id"],
        material_name=row["material_name"],
        quantity=row["quantity"],
        material_type=row["material_type"],
        default_npc_price=row["default_npc_price"] or 0,
    )
