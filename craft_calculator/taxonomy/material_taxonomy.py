"""
Material taxonomy for crafting recipes.

Two enumerations drive every structural question the engine answers:
  - ``MaterialType``  — how a material is acquired (skill, loot, vendor).
  - ``MatchProfile``  — how a requested set of types is compared against the
    types present on a recipe's material lines.

Usage example::

    from craft_calculator.taxonomy.material_taxonomy import MaterialType, MatchProfile

    wanted  = {MaterialType.DROP, MaterialType.BUY}
    profile = MatchProfile.EXCLUSIVE

This module has NO imports from any other ``craft_calculator`` package.
"""

from enum import StrEnum


class MaterialType(StrEnum):
    """How a recipe input is acquired."""

    PROFESSION = "profession"
    """Produced through an in-game skill; never purchasable, so carries no NPC cost."""

    DROP = "drop"
    """Looted from monsters or gathered; has a reference NPC/market price."""

    BUY = "buy"
    """Bought from a vendor; has a reference NPC price."""


class MatchProfile(StrEnum):
    """Policy for matching a recipe's material types against a requested set."""

    EXCLUSIVE = "exclusive"
    """Every material line's type is in the requested set."""

    CONTAINS_ANY = "contains_any"
    """At least one material line's type is in the requested set."""

    CONTAINS_ALL = "contains_all"
    """Every requested type appears on at least one material line."""

    NOT_CONTAINS_ANY = "not_contains_any"
    """No material line's type is in the requested set."""


ALL_MATERIAL_TYPES: frozenset[str] = frozenset(t.value for t in MaterialType)
ALL_MATCH_PROFILES: tuple[str, ...] = tuple(p.value for p in MatchProfile)
