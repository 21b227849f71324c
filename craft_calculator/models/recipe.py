"""
Recipe and material-line models.

``Recipe`` is a craftable item definition: how many units one craft yields
and what the NPC vendor pays per unit. Recipes are identified by ``name``
(unique, case-sensitive) in the catalogue and by ``recipe_id`` once stored.

``MaterialLine`` is one required input of a recipe. A recipe owns its lines;
deleting a recipe deletes them. Material names are free text and are always
compared case-insensitively by the engine (see ``engine.normalize``).

``RecipeDetail`` couples a recipe with its ordered material lines. It is the
shape written by the importer and returned by catalogue views.

All models are frozen: the engine treats every catalogue read as an
immutable snapshot.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from craft_calculator.taxonomy.material_taxonomy import MaterialType


class Recipe(BaseModel):
    """A craftable item definition.

    Attributes:
        recipe_id: Auto-assigned DB PK; ``None`` before insertion.
        name: Unique display name, e.g. ``"100 Nightmare Medium Potion"``.
        quantity_produced: Output units per single craft. ``0`` is tolerated
            for legacy rows and treated as ``1`` in revenue calculations.
        npc_sell_price: Reference NPC price paid per produced unit.
    """

    model_config = ConfigDict(frozen=True)

    recipe_id: Optional[int] = None
    name: str
    quantity_produced: int = 1
    npc_sell_price: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Recipe name must be a non-empty string.")
        return v

    @field_validator("quantity_produced", "npc_sell_price")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Value must be >= 0, got {v}.")
        return v


class MaterialLine(BaseModel):
    """One required input of a recipe.

    Attributes:
        line_id: Auto-assigned DB PK; ``None`` before insertion.
        recipe_id: FK to ``recipes.id``; ``None`` while part of an unsaved
            ``RecipeDetail``.
        material_name: Free-text material name (case preserved for display).
        quantity: Units consumed per single craft of the parent recipe.
        material_type: Acquisition type; parsed case-insensitively.
        default_npc_price: Reference NPC unit price. Always ``0`` for
            ``profession`` materials, which cannot be purchased.
    """

    model_config = ConfigDict(frozen=True)

    line_id: Optional[int] = None
    recipe_id: Optional[int] = None
    material_name: str
    quantity: int
    material_type: MaterialType
    default_npc_price: int = 0

    @field_validator("material_name")
    @classmethod
    def validate_material_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("material_name must be a non-empty string.")
        return v

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"quantity must be >= 0, got {v}.")
        return v

    @field_validator("material_type", mode="before")
    @classmethod
    def normalize_material_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("default_npc_price")
    @classmethod
    def validate_price(cls, v: int, info: ValidationInfo) -> int:
        if v < 0:
            raise ValueError(f"default_npc_price must be >= 0, got {v}.")
        # Profession materials have no purchasable cost.
        if info.data.get("material_type") == MaterialType.PROFESSION:
            return 0
        return v


class RecipeDetail(Recipe):
    """A recipe together with its material lines (catalogue order)."""

    materials: list[MaterialLine] = []
