"""Craft Calculator — recipe profitability and craftability analysis."""

__version__ = "0.1.0"
