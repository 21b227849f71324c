"""
Input normalization shared by every engine component.

``normalize_key()`` is the ONE case-insensitive comparison rule for material
names and material types. Every component compares through it so that
feasibility, filtering and aggregation never disagree on casing.

Also provides:
  - ``build_inventory()``      — caller entry list -> read-only name→quantity map.
  - ``split_type_tokens()``    — "drop, BUY" -> frozenset({"drop", "buy"}).
  - ``parse_material_types()`` — same, but an empty result is an error.
  - ``parse_match_profile()``  — string -> ``MatchProfile``.
  - ``group_lines_by_recipe()`` — flat material-line list -> per-recipe lists.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from craft_calculator.engine.errors import InvalidInventory, InvalidProfile
from craft_calculator.models.recipe import MaterialLine
from craft_calculator.models.results import Quantity
from craft_calculator.taxonomy.material_taxonomy import MatchProfile

logger = logging.getLogger(__name__)

Inventory = Mapping[str, Quantity]
TypeTokens = Union[str, Iterable[str], None]

EMPTY_INVENTORY: Inventory = MappingProxyType({})


def normalize_key(value: str) -> str:
    """Return the comparison form of a material name or type token."""
    return value.strip().lower()


def _valid_quantity(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def build_inventory(entries: Optional[Iterable[Mapping[str, Any]]]) -> Inventory:
    """Build a read-only inventory from a caller-supplied entry list.

    Each entry is a mapping with ``material_name`` and ``quantity``.
    Duplicate names (compared via ``normalize_key``) are summed. Invalid
    entries are skipped with a warning as long as at least one entry is
    valid.

    Args:
        entries: Caller entries, e.g. ``[{"material_name": "Herb", "quantity": 7}]``.
            ``None`` or an empty list gives an empty inventory.

    Returns:
        ``MappingProxyType`` of normalized name → summed quantity.

    Raises:
        InvalidInventory: If the list is non-empty and every entry is invalid.
    """
    if not entries:
        return EMPTY_INVENTORY

    totals: dict[str, Quantity] = {}
    supplied = 0
    skipped = 0
    for entry in entries:
        supplied += 1
        name = entry.get("material_name") if isinstance(entry, Mapping) else None
        qty = entry.get("quantity") if isinstance(entry, Mapping) else None
        if not isinstance(name, str) or not name.strip() or not _valid_quantity(qty):
            skipped += 1
            continue
        key = normalize_key(name)
        totals[key] = totals.get(key, 0) + qty

    if not totals:
        raise InvalidInventory(supplied)
    if skipped:
        logger.warning(
            "Ignored %d invalid inventory entr%s of %d.",
            skipped, "y" if skipped == 1 else "ies", supplied,
        )
    return MappingProxyType(totals)


def split_type_tokens(types: TypeTokens) -> frozenset[str]:
    """Parse material-type tokens; unknown tokens are kept as opaque strings.

    Accepts a comma-separated string (``"drop, buy"``) or an iterable of
    tokens. Tokens are trimmed and lower-cased; blanks are dropped.
    """
    if types is None:
        return frozenset()
    raw = types.split(",") if isinstance(types, str) else types
    return frozenset(normalize_key(t) for t in raw if t and t.strip())


def parse_material_types(types: TypeTokens) -> frozenset[str]:
    """Like ``split_type_tokens()`` but an empty result raises ``InvalidProfile``."""
    tokens = split_type_tokens(types)
    if not tokens:
        raise InvalidProfile.empty_types()
    return tokens


def parse_match_profile(value: Union[str, MatchProfile]) -> MatchProfile:
    """Resolve a match-profile string (case-insensitive) to ``MatchProfile``.

    Raises:
        InvalidProfile: If the value is not one of the four profiles.
    """
    if isinstance(value, MatchProfile):
        return value
    if not isinstance(value, str):
        raise InvalidProfile.unknown_profile(value)
    try:
        return MatchProfile(normalize_key(value))
    except ValueError:
        raise InvalidProfile.unknown_profile(value) from None


def group_lines_by_recipe(
    material_lines: Iterable[MaterialLine],
) -> dict[int, list[MaterialLine]]:
    """Group material lines by ``recipe_id``, preserving input order.

    Lines without a ``recipe_id`` belong to no stored recipe and are dropped,
    so a recipe is only ever joined with lines carrying its own id. Recipes
    passed to the engine must therefore carry ids (catalogue reads always do);
    an id-less recipe is treated as having no material lines.
    """
    by_recipe: dict[int, list[MaterialLine]] = defaultdict(list)
    for line in material_lines:
        if line.recipe_id is None:
            continue
        by_recipe[line.recipe_id].append(line)
    return dict(by_recipe)
