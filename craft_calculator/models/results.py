"""
Engine result records.

Every analytical operation returns plain, frozen pydantic models so a caller
can emit them directly as JSON (``model_dump(mode="json")``).

Craft counts
------------
"Unlimited craftability" (a recipe with no constraining material) is NOT a
float infinity: infinities do not survive JSON round-trips. Results carry an
explicit ``unbounded`` flag and leave ``max_crafts_possible`` as ``None``.
``CraftCount`` is the in-memory tagged value used to compute and sort these::

    CraftCount.bounded(3) < CraftCount.unbounded()   # True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from craft_calculator.taxonomy.material_taxonomy import MaterialType

Quantity = Union[int, float]


@dataclass(frozen=True)
class CraftCount:
    """Tagged craft count: either a finite ``value`` or unbounded.

    Ordering is explicit: every unbounded count is greater than every
    bounded one, and two unbounded counts compare equal.
    """

    value: Optional[int]

    @classmethod
    def bounded(cls, n: int) -> "CraftCount":
        if n < 0:
            raise ValueError(f"Craft count must be >= 0, got {n}.")
        return cls(value=n)

    @classmethod
    def unbounded(cls) -> "CraftCount":
        return cls(value=None)

    @property
    def is_unbounded(self) -> bool:
        return self.value is None

    @property
    def is_craftable(self) -> bool:
        """True when at least one craft is possible."""
        return self.value is None or self.value > 0

    def _rank(self) -> tuple[int, int]:
        return (1, 0) if self.value is None else (0, self.value)

    def __lt__(self, other: "CraftCount") -> bool:
        return self._rank() < other._rank()

    def __le__(self, other: "CraftCount") -> bool:
        return self._rank() <= other._rank()

    def __gt__(self, other: "CraftCount") -> bool:
        return self._rank() > other._rank()

    def __ge__(self, other: "CraftCount") -> bool:
        return self._rank() >= other._rank()


def craft_sort_key(count: CraftCount, name: str) -> tuple[int, int, str]:
    """Sort key: unbounded first, then count descending, then name ascending."""
    if count.is_unbounded:
        return (0, 0, name)
    return (1, -(count.value or 0), name)


# ── Feasibility ───────────────────────────────────────────────────────────────


class MaterialRequirement(BaseModel):
    """Per-material breakdown for a craftable recipe.

    Attributes:
        material_name: Name as stored on the recipe line.
        quantity_per_craft: Units consumed by one craft.
        total_quantity_needed_for_max_crafts: ``quantity_per_craft`` times
            the max craft count; ``0`` for zero-quantity lines of an
            unbounded recipe.
        user_has_quantity: Held quantity (0 when not in the inventory).
    """

    model_config = ConfigDict(frozen=True)

    material_name: str
    quantity_per_craft: int
    total_quantity_needed_for_max_crafts: int
    user_has_quantity: Quantity


class CraftabilityResult(BaseModel):
    """One recipe that can be crafted right now.

    Attributes:
        recipe_id: Catalogue key of the recipe.
        recipe_name: Recipe name.
        quantity_produced_per_craft: Output units per craft.
        max_crafts_possible: Finite craft count, ``None`` when unbounded.
        unbounded: ``True`` when nothing limits the craft count.
        total_items_producible: ``max_crafts_possible × quantity_produced_per_craft``;
            ``None`` when unbounded.
        materials_needed: Per-material breakdown in catalogue order.
    """

    model_config = ConfigDict(frozen=True)

    recipe_id: Optional[int]
    recipe_name: str
    quantity_produced_per_craft: int
    max_crafts_possible: Optional[int] = None
    unbounded: bool = False
    total_items_producible: Optional[int] = None
    materials_needed: list[MaterialRequirement] = []

    @property
    def craft_count(self) -> CraftCount:
        if self.unbounded:
            return CraftCount.unbounded()
        return CraftCount.bounded(self.max_crafts_possible or 0)


# ── Analysis ──────────────────────────────────────────────────────────────────


class MaterialShortfall(BaseModel):
    """How far the caller is from one craft, for a single material line."""

    model_config = ConfigDict(frozen=True)

    material_name: str
    material_type: MaterialType
    quantity_per_craft: int
    user_has_quantity: Quantity
    quantity_missing_for_one_craft: Quantity


class CraftAnalysis(BaseModel):
    """Craftability report for one recipe, including shortfalls.

    Unlike ``CraftabilityResult`` this is produced for recipes that cannot be
    crafted yet (``can_craft_now`` is ``False``, ``max_crafts_possible`` 0).
    """

    model_config = ConfigDict(frozen=True)

    recipe_id: Optional[int]
    recipe_name: str
    quantity_produced_per_craft: int
    max_crafts_possible: Optional[int] = None
    unbounded: bool = False
    total_items_producible: Optional[int] = None
    can_craft_now: bool
    materials: list[MaterialShortfall] = []

    @property
    def craft_count(self) -> CraftCount:
        if self.unbounded:
            return CraftCount.unbounded()
        return CraftCount.bounded(self.max_crafts_possible or 0)


# ── Profitability ─────────────────────────────────────────────────────────────


class ProfitResult(BaseModel):
    """NPC-price profitability of one recipe.

    Attributes:
        recipe_id: Catalogue key of the recipe.
        name: Recipe name.
        quantity_produced: Output units per craft, as stored.
        npc_sell_price_per_unit: NPC price per produced unit.
        total_revenue_npc: Sell price times units produced (0 produced counts as 1).
        total_material_cost_npc: Sum of quantity × price over non-profession lines.
        profit_npc: Revenue minus cost; negative values are valid.
    """

    model_config = ConfigDict(frozen=True)

    recipe_id: Optional[int]
    name: str
    quantity_produced: int
    npc_sell_price_per_unit: int
    total_revenue_npc: int
    total_material_cost_npc: int
    profit_npc: int


# ── Usage ─────────────────────────────────────────────────────────────────────


class UsageSummary(BaseModel):
    """Aggregate demand for one (material name, material type) pair.

    ``reference_npc_price`` is only populated for name-filtered summaries. It
    is the highest ``default_npc_price`` seen across recipes for the pair: a
    best-effort reference, not an authoritative market price.
    """

    model_config = ConfigDict(frozen=True)

    material_name: str
    material_type: MaterialType
    total_quantity_needed: int
    used_in_recipes_count: int
    reference_npc_price: Optional[int] = None
