"""
Recipe seed loader: JSON file → validated ``RecipeDetail`` list → SQLite.

File format
-----------
A JSON array of recipe objects::

    [
      {
        "name": "100 Nightmare Medium Potion",
        "quantity_produced": 100,
        "npc_sell_price": 45,
        "materials": [
          {"material_name": "Herb", "quantity": 20, "material_type": "drop",
           "default_npc_price": 30},
          {"material_name": "Empty Vial", "quantity": 100, "material_type": "buy",
           "default_npc_price": 5}
        ]
      }
    ]

Validation rules
----------------
- The top-level value must be an array.
- Recipe names must be unique within the file (case-sensitive, like the DB).
- Every material needs ``material_name``, ``quantity`` and ``material_type``.
- Everything else is enforced by the pydantic models.

Usage
-----
    from craft_calculator.ingestion.recipe_loader import load_recipe_file, upsert_recipes

    recipes = load_recipe_file(Path("config/recipes/sample_recipes.json"))
    with get_connection(db_path, ensure_schema=True) as conn:
        upsert_recipes(conn, recipes)
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from craft_calculator.db.repositories.recipe_repo import RecipeRepository
from craft_calculator.models.recipe import RecipeDetail

log = logging.getLogger(__name__)

_REQUIRED_MATERIAL_FIELDS = ("material_name", "quantity", "material_type")


def _validate_records(records: list[dict[str, Any]]) -> None:
    """Raise ValueError for structural problems the models cannot see."""
    seen: set[str] = set()
    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise ValueError(f"Recipe at index {i} is not an object.")
        name = rec.get("name")
        if not name:
            raise ValueError(f"Recipe at index {i} is missing 'name'.")
        if name in seen:
            raise ValueError(f"Duplicate recipe name '{name}' at index {i}.")
        seen.add(name)

        materials = rec.get("materials", [])
        if not isinstance(materials, list):
            raise ValueError(f"Recipe '{name}': 'materials' must be an array.")
        for j, mat in enumerate(materials):
            if not isinstance(mat, dict):
                raise ValueError(f"Recipe '{name}': material #{j} is not an object.")
            missing = [f for f in _REQUIRED_MATERIAL_FIELDS if mat.get(f) in (None, "")]
            if missing:
                raise ValueError(
                    f"Recipe '{name}': material #{j} is missing {', '.join(missing)}."
                )


def parse_recipe_records(records: Any) -> list[RecipeDetail]:
    """Validate raw JSON-decoded records into ``RecipeDetail`` models.

    Raises:
        ValueError: On structural problems or model validation failures
            (the message names the offending recipe index).
    """
    if not isinstance(records, list):
        raise ValueError("Recipe file must contain a JSON array.")
    _validate_records(records)

    details: list[RecipeDetail] = []
    for i, rec in enumerate(records):
        try:
            details.append(RecipeDetail(**rec))
        except ValidationError as exc:
            raise ValueError(f"Recipe at index {i} ('{rec.get('name')}') is invalid:\n{exc}") from exc
    return details


def load_recipe_file(path: Path) -> list[RecipeDetail]:
    """Read and validate a recipe seed file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON or invalid recipes.
    """
    if not path.exists():
        raise FileNotFoundError(f"Recipe file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Recipe file is not valid JSON: {exc}") from exc

    details = parse_recipe_records(records)
    log.info("Loaded %d recipes from %s", len(details), path)
    return details


def upsert_recipes(conn: sqlite3.Connection, details: list[RecipeDetail]) -> int:
    """Write recipes by name (existing names are replaced with their materials).

    Returns:
        Number of recipes written.
    """
    repo = RecipeRepository(conn)
    for detail in details:
        repo.upsert_by_name(detail)
    log.info("Upserted %d recipes.", len(details))
    return len(details)
