"""
Reporting helpers for CLI output.

Modules
-------
formatters : ASCII tables for each engine result type (strings for typer.echo).
export     : JSON / CSV writers for engine results.
"""
