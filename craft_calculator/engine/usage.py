"""
Usage aggregator: total demand per material across the whole catalogue.

Lines are grouped by (normalized material name, material type). The first
spelling seen for a name is the one reported. Per group:

  total_quantity_needed  = sum of per-craft quantities
  used_in_recipes_count  = distinct recipe ids contributing

Reference price
---------------
When the caller filters by name, each group also carries
``reference_npc_price`` = the highest ``default_npc_price`` among its lines
(``None`` for profession materials). Recipes may record different prices for
the same nominal material, so this is a best-effort heuristic, not a price
the engine vouches for.

Sort: used_in_recipes_count desc, total_quantity_needed desc, name asc.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from craft_calculator.engine.normalize import TypeTokens, normalize_key, split_type_tokens
from craft_calculator.models.recipe import MaterialLine
from craft_calculator.models.results import UsageSummary
from craft_calculator.taxonomy.material_taxonomy import MaterialType

logger = logging.getLogger(__name__)


@dataclass
class _UsageGroup:
    """Running totals for one (name, type) pair."""

    display_name: str
    material_type: MaterialType
    total_quantity: int = 0
    recipe_ids: set = field(default_factory=set)
    max_price: int = 0


def summarize_usage(
    material_lines: Sequence[MaterialLine],
    name_filter: Optional[str] = None,
    type_filter: TypeTokens = None,
) -> list[UsageSummary]:
    """Aggregate material demand across recipes.

    Args:
        material_lines: Full material-line list from the catalogue.
        name_filter:    Case-insensitive substring of the material name.
                        Blank or ``None`` disables the filter and the
                        reference price.
        type_filter:    Type tokens (iterable or comma-separated string).
                        Empty disables the filter.

    Returns:
        One ``UsageSummary`` per (name, type) group, sorted by demand.
    """
    name_part = normalize_key(name_filter) if name_filter else ""
    types = split_type_tokens(type_filter)

    groups: dict[tuple[str, str], _UsageGroup] = {}
    for line in material_lines:
        key_name = normalize_key(line.material_name)
        key_type = normalize_key(line.material_type)
        if name_part and name_part not in key_name:
            continue
        if types and key_type not in types:
            continue

        group = groups.get((key_name, key_type))
        if group is None:
            group = _UsageGroup(
                display_name=line.material_name,
                material_type=line.material_type,
            )
            groups[(key_name, key_type)] = group
        group.total_quantity += line.quantity
        group.recipe_ids.add(line.recipe_id)
        group.max_price = max(group.max_price, line.default_npc_price)

    summaries = []
    for (key_name, _), group in groups.items():
        reference_price = None
        if name_part and group.material_type != MaterialType.PROFESSION:
            reference_price = group.max_price
        summaries.append(
            (
                key_name,
                UsageSummary(
                    material_name=group.display_name,
                    material_type=group.material_type,
                    total_quantity_needed=group.total_quantity,
                    used_in_recipes_count=len(group.recipe_ids),
                    reference_npc_price=reference_price,
                ),
            )
        )

    summaries.sort(
        key=lambda pair: (
            -pair[1].used_in_recipes_count,
            -pair[1].total_quantity_needed,
            pair[0],
            pair[1].material_type.value,
        )
    )
    logger.debug("Usage summary: %d groups from %d lines.", len(summaries), len(material_lines))
    return [summary for _, summary in summaries]
