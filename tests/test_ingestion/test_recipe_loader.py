"""
Tests for craft_calculator/ingestion/recipe_loader.py.

Covers file loading, structural validation, model validation errors and the
upsert into SQLite. Also checks that the bundled sample file is valid.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from craft_calculator.db.repositories.recipe_repo import RecipeRepository
from craft_calculator.ingestion.recipe_loader import (
    load_recipe_file,
    parse_recipe_records,
    upsert_recipes,
)

SAMPLE_FILE = Path(__file__).resolve().parents[2] / "config" / "recipes" / "sample_recipes.json"


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _potion(**overrides) -> dict:
    rec = {
        "name": "Potion",
        "quantity_produced": 5,
        "npc_sell_price": 20,
        "materials": [
            {"material_name": "Herb", "quantity": 2, "material_type": "drop",
             "default_npc_price": 15},
        ],
    }
    rec.update(overrides)
    return rec


class TestLoadRecipeFile:
    def test_sample_file_is_valid(self):
        details = load_recipe_file(SAMPLE_FILE)
        names = [d.name for d in details]
        assert "100 Nightmare Medium Potion" in names
        assert "Campfire" in names
        campfire = next(d for d in details if d.name == "Campfire")
        assert campfire.materials == []

    def test_loads_records(self, tmp_path):
        details = load_recipe_file(_write(tmp_path, [_potion()]))
        assert len(details) == 1
        assert details[0].materials[0].default_npc_price == 15

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_recipe_file(tmp_path / "nope.json")

    def test_bad_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_recipe_file(path)


class TestParseRecipeRecords:
    def test_top_level_must_be_array(self):
        with pytest.raises(ValueError, match="JSON array"):
            parse_recipe_records({"name": "Potion"})

    def test_record_must_be_object(self):
        with pytest.raises(ValueError, match="index 0 is not an object"):
            parse_recipe_records(["Potion"])

    def test_missing_name(self):
        with pytest.raises(ValueError, match="missing 'name'"):
            parse_recipe_records([{"materials": []}])

    def test_duplicate_name(self):
        with pytest.raises(ValueError, match="Duplicate recipe name 'Potion'"):
            parse_recipe_records([_potion(), _potion()])

    def test_names_differing_in_case_are_distinct(self):
        details = parse_recipe_records([_potion(), _potion(name="potion")])
        assert len(details) == 2

    def test_materials_must_be_array(self):
        with pytest.raises(ValueError, match="'materials' must be an array"):
            parse_recipe_records([_potion(materials={"Herb": 2})])

    def test_material_missing_fields(self):
        rec = _potion(materials=[{"material_name": "Herb", "quantity": 2}])
        with pytest.raises(ValueError, match="material #0 is missing material_type"):
            parse_recipe_records([rec])

    def test_model_errors_are_value_errors(self):
        rec = _potion(materials=[
            {"material_name": "Herb", "quantity": 2, "material_type": "crafted"},
        ])
        with pytest.raises(ValueError, match=r"index 0 \('Potion'\) is invalid"):
            parse_recipe_records([rec])

    def test_negative_sell_price_rejected(self):
        with pytest.raises(ValueError):
            parse_recipe_records([_potion(npc_sell_price=-1)])


class TestUpsertRecipes:
    def test_upsert_writes_and_replaces(self, in_memory_db):
        assert upsert_recipes(in_memory_db, parse_recipe_records([_potion()])) == 1

        changed = _potion(npc_sell_price=30, materials=[])
        upsert_recipes(in_memory_db, parse_recipe_records([changed]))

        repo = RecipeRepository(in_memory_db)
        assert repo.count() == 1
        stored = repo.get_by_id(repo.get_by_name("Potion").recipe_id)
        assert stored.npc_sell_price == 30
        assert stored.materials == []

    def test_sample_file_round_trip(self, in_memory_db):
        details = load_recipe_file(SAMPLE_FILE)
        upsert_recipes(in_memory_db, details)
        repo = RecipeRepository(in_memory_db)
        assert repo.count() == len(details)
        assert repo.get_sell_price("Iron Ingot") == 80
