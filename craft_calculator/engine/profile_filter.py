"""
Material profile filter: classify recipes by the acquisition types of their
material lines.

Match profiles (``MatchProfile``)
---------------------------------
exclusive         every line type is requested              ("uses only drops")
contains_any      at least one line type is requested       ("uses something bought")
contains_all      every requested type appears on a line
not_contains_any  no line type is requested                 ("no profession mats")

A recipe with zero material lines matches ``not_contains_any`` only: the
other three profiles need at least one line as evidence.

Unknown type tokens
-------------------
Requested tokens are compared as plain lower-cased strings. A token that is
not a ``MaterialType`` value is accepted but never matches a line, so e.g.
``contains_all`` with ``{"drop", "crafted"}`` matches nothing, while
``not_contains_any`` with ``{"crafted"}`` matches everything.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Union

from craft_calculator.engine.catalogue_view import attach_materials
from craft_calculator.engine.normalize import (
    TypeTokens,
    normalize_key,
    parse_match_profile,
    parse_material_types,
)
from craft_calculator.models.recipe import MaterialLine, Recipe, RecipeDetail
from craft_calculator.taxonomy.material_taxonomy import MatchProfile

logger = logging.getLogger(__name__)


def matches_profile(
    line_types: Sequence[str],
    requested: frozenset[str],
    profile: MatchProfile,
) -> bool:
    """Decide one recipe given its (normalized) line types."""
    if not line_types:
        return profile == MatchProfile.NOT_CONTAINS_ANY

    if profile == MatchProfile.EXCLUSIVE:
        return all(t in requested for t in line_types)
    if profile == MatchProfile.CONTAINS_ANY:
        return any(t in requested for t in line_types)
    if profile == MatchProfile.CONTAINS_ALL:
        present = set(line_types)
        return all(t in present for t in requested)
    return not any(t in requested for t in line_types)


def filter_by_material_profile(
    recipes: Sequence[Recipe],
    material_lines: Sequence[MaterialLine],
    requested_types: TypeTokens,
    match_profile: Union[str, MatchProfile] = MatchProfile.EXCLUSIVE,
) -> list[RecipeDetail]:
    """Return the recipes whose material-type composition matches a profile.

    Args:
        recipes:         Full recipe list from the catalogue.
        material_lines:  Full material-line list from the catalogue.
        requested_types: Type tokens, as an iterable or a comma-separated string.
        match_profile:   One of the four ``MatchProfile`` values (case-insensitive).

    Returns:
        Matching recipes with their material lines, in catalogue order.

    Raises:
        InvalidProfile: Unknown profile, or no type tokens after trimming.
    """
    profile = parse_match_profile(match_profile)
    requested = parse_material_types(requested_types)

    matched = [
        detail
        for detail in attach_materials(recipes, material_lines)
        if matches_profile(
            [normalize_key(m.material_type) for m in detail.materials],
            requested,
            profile,
        )
    ]
    logger.debug(
        "Profile filter %s %s: %d of %d recipes matched.",
        profile.value, sorted(requested), len(matched), len(recipes),
    )
    return matched
