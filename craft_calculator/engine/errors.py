"""
Caller-input errors raised by the analytical engine.

The engine never raises for internal reasons given a consistent catalogue
snapshot. Both conditions below describe bad caller input; a transport layer
(or the CLI) maps them to a user-facing failure.
"""

from __future__ import annotations

from craft_calculator.taxonomy.material_taxonomy import ALL_MATCH_PROFILES


class CraftEngineError(ValueError):
    """Base class for engine input errors."""


class InvalidInventory(CraftEngineError):
    """Raised when every entry of a non-empty inventory list is malformed.

    Attributes:
        entry_count: Number of entries supplied by the caller.
    """

    def __init__(self, entry_count: int) -> None:
        self.entry_count = entry_count
        super().__init__(
            f"No valid material in inventory ({entry_count} entries supplied). "
            "Each entry needs a non-empty 'material_name' and a numeric 'quantity' >= 0."
        )


class InvalidProfile(CraftEngineError):
    """Raised for an unknown match profile or an empty requested-type set."""

    @classmethod
    def unknown_profile(cls, value: object) -> "InvalidProfile":
        return cls(
            f"Invalid match profile '{value}'. "
            f"Valid: {', '.join(ALL_MATCH_PROFILES)}."
        )

    @classmethod
    def empty_types(cls) -> "InvalidProfile":
        return cls(
            "No material type supplied (e.g. 'profession' or 'drop,buy')."
        )
