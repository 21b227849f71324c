"""
Export helpers for engine results.

All writers create parent directories, write to disk and return the written
``Path``. They accept generic ``list[dict]`` data; ``results_to_records()``
turns engine result models into that shape.

CSV exports are flat (no nested lists) so they load directly in a
spreadsheet. ``flatten_records_for_csv()`` collapses nested material lists
into a single ``materials`` text column, e.g. ``"Herb x2; Empty Vial x1"``.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel


def results_to_records(results: Sequence[BaseModel]) -> list[dict]:
    """JSON-ready dicts for a list of result models."""
    return [r.model_dump(mode="json") for r in results]


def _material_summary(materials: list[dict]) -> str:
    parts = []
    for m in materials:
        qty = m.get("quantity_per_craft", m.get("quantity", ""))
        parts.append(f"{m.get('material_name', '')} x{qty}")
    return "; ".join(parts)


def flatten_records_for_csv(records: list[dict]) -> list[dict]:
    """Replace nested material lists with a one-line ``materials`` column."""
    flat: list[dict] = []
    for rec in records:
        row: dict = {}
        for key, val in rec.items():
            if isinstance(val, list):
                row["materials"] = _material_summary(val)
            else:
                row[key] = val
        flat.append(row)
    return flat


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    Flat row dicts.
        path:       Destination file path.
        fieldnames: Column order. Defaults to the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file and return ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_results(results: Sequence[BaseModel], path: Path) -> Path:
    """Write results as CSV when ``path`` ends in ``.csv``, otherwise JSON."""
    records = results_to_records(results)
    if path.suffix.lower() == ".csv":
        return export_to_csv(flatten_records_for_csv(records), path)
    return export_to_json(records, path)
