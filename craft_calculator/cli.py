"""
Craft Calculator — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Read the catalogue snapshot / run the engine.
  5. Report result to stdout (ASCII table, ``--json``, or ``--output`` file).

Install and run::

    pip install -e .
    craft-calc --help
    craft-calc init-db
    craft-calc import-recipes
    craft-calc craftable --have "Herb=7" --have "Empty Vial=30"
    craft-calc analyze --inventory my_bag.json
    craft-calc profit --top 10
    craft-calc filter-profile --types drop,buy --match exclusive
    craft-calc usage --name vial
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="craft-calc",
    help="Crafting economy calculator: profit, craftability and material analysis.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from craft_calculator.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config) -> None:
    from craft_calculator.utils.logging import configure_logging
    configure_logging(config.logging)


def _setup(config_path: Optional[str]):
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    return config


def _connect(config, db_path: Optional[str]):
    from craft_calculator.db.connection import get_connection

    return get_connection(
        db_path or config.database.db_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
        ensure_schema=True,
    )


def _catalogue_call_or_exit(config, db_path: Optional[str], action, failure: str):
    """Run ``action(conn)`` in one catalogue transaction and return its result.

    ``sqlite3`` errors are reported as ``[ERROR] <failure>: ...`` with exit code 1.
    """
    try:
        with _connect(config, db_path) as conn:
            return action(conn)
    except sqlite3.Error as exc:
        typer.echo(f"[ERROR] {failure}: {exc}", err=True)
        raise typer.Exit(code=1)


def _load_snapshot_or_exit(config, db_path: Optional[str]):
    from craft_calculator.db.repositories.recipe_repo import load_snapshot

    return _catalogue_call_or_exit(config, db_path, load_snapshot, "Could not read catalogue")


def _parse_have(values: list[str]) -> list[dict[str, Any]]:
    """Turn ``NAME=QTY`` strings into inventory entries.

    Malformed quantities are passed through as-is so ``build_inventory``
    applies its shape check (skip, or fail when nothing is valid).
    """
    entries: list[dict[str, Any]] = []
    for raw in values:
        name, sep, qty_text = raw.rpartition("=")
        if not sep:
            entries.append({"material_name": raw, "quantity": None})
            continue
        qty: Any = qty_text.strip()
        for cast in (int, float):
            try:
                qty = cast(qty_text)
                break
            except ValueError:
                continue
        entries.append({"material_name": name.strip(), "quantity": qty})
    return entries


def _read_inventory_file(path: Path) -> list[dict[str, Any]]:
    """Read an inventory JSON file: an entry array or a ``{name: qty}`` object."""
    if not path.exists():
        typer.echo(f"[ERROR] Inventory file not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] Inventory JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)

    if isinstance(data, dict):
        data = data.get("availableMaterials", data)
    if isinstance(data, dict):
        return [{"material_name": k, "quantity": v} for k, v in data.items()]
    if isinstance(data, list):
        return data
    typer.echo("[ERROR] Inventory file must contain an array or an object.", err=True)
    raise typer.Exit(code=1)


def _build_inventory_or_exit(have: Optional[list[str]], inventory_file: Optional[str]):
    from craft_calculator.engine.errors import InvalidInventory
    from craft_calculator.engine.normalize import build_inventory

    entries = _parse_have(have or [])
    if inventory_file:
        entries.extend(_read_inventory_file(Path(inventory_file)))
    try:
        return build_inventory(entries)
    except InvalidInventory as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _emit(config, results: list, table: str, as_json: bool, output: Optional[str]) -> None:
    """Print results as a table or JSON, and optionally write them to a file.

    A bare filename (``profit.csv``) goes under ``data.outputs_dir``; any path
    with a directory part, including ``./profit.csv``, is used as given.
    """
    from craft_calculator.reporting.export import export_results, results_to_records

    if as_json:
        typer.echo(json.dumps(results_to_records(results), indent=2))
    else:
        typer.echo(table)

    if output:
        out_path = Path(output)
        if out_path.name == output:
            out_path = Path(config.data.outputs_dir) / out_path
        written = export_results(results, out_path)
        typer.echo(f"[OK] Wrote {len(results)} row(s) to {written}", err=True)


_CONFIG_OPT = typer.Option(None, "--config", help="Path to TOML config file.")
_DB_OPT = typer.Option(None, "--db-path", help="Override DB path from config.")
_JSON_OPT = typer.Option(False, "--json", help="Print results as JSON.")
_OUTPUT_OPT = typer.Option(
    None, "--output", "-o", help="Also write results to a .json or .csv file."
)
_HAVE_OPT = typer.Option(
    None, "--have", help="Held material as NAME=QTY. Repeatable."
)
_INVENTORY_OPT = typer.Option(
    None, "--inventory", "-i", help="JSON inventory file (entry array or {name: qty})."
)


# ── Setup commands ────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Initialize the SQLite catalogue. Safe to run multiple times."""
    from craft_calculator.db.schema import ALL_TABLE_NAMES

    config = _setup(config_path)
    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    _catalogue_call_or_exit(
        config, db_path, lambda conn: None, "Could not initialize database"
    )

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPT,
    show_full: bool = typer.Option(False, "--full", help="Print the full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:  {config.database.db_path}")
    typer.echo(f"  Recipe seed:    {config.data.recipes_seed_file}")
    typer.echo(f"  Outputs dir:    {config.data.outputs_dir}")
    typer.echo(f"  Log level:      {config.logging.level}")
    typer.echo(f"  Debug mode:     {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("import-recipes")
def import_recipes(
    recipes_file: Optional[str] = typer.Option(
        None, "--file", "-f",
        help="Recipe JSON file. Defaults to config.data.recipes_seed_file.",
    ),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Validate recipes but do not write to the database."
    ),
) -> None:
    """Import recipes from a JSON file. Existing names are replaced."""
    from craft_calculator.ingestion.recipe_loader import load_recipe_file, upsert_recipes

    config = _setup(config_path)
    path = Path(recipes_file) if recipes_file else Path(config.data.recipes_seed_file)
    typer.echo(f"Loading recipes from: {path}")

    try:
        details = load_recipe_file(path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"  Validated {len(details)} recipe(s).")
    if dry_run:
        typer.echo("[DRY RUN] No recipes written to database.")
        for d in details:
            typer.echo(f"  {d.name} | {len(d.materials)} material(s)")
        return

    written = _catalogue_call_or_exit(
        config, db_path,
        lambda conn: upsert_recipes(conn, details),
        "Import failed, nothing written",
    )

    typer.echo(f"  Upserted {written} recipe(s) into database.")
    typer.echo("[OK] Recipes imported.")


# ── Catalogue commands ────────────────────────────────────────────────────────

@app.command("list-recipes")
def list_recipes(
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
) -> None:
    """List every recipe with its materials, ordered by name."""
    from craft_calculator.db.repositories.recipe_repo import RecipeRepository
    from craft_calculator.reporting.formatters import format_recipe_list

    config = _setup(config_path)
    details = _catalogue_call_or_exit(
        config, db_path,
        lambda conn: RecipeRepository(conn).list_details(),
        "Could not read catalogue",
    )
    _emit(config, details, format_recipe_list(details), as_json, None)


@app.command("show-recipe")
def show_recipe(
    recipe_id: int = typer.Argument(..., help="Recipe id."),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
) -> None:
    """Show one recipe and its materials."""
    from craft_calculator.db.repositories.recipe_repo import RecipeRepository
    from craft_calculator.reporting.formatters import format_recipe_detail

    config = _setup(config_path)
    detail = _catalogue_call_or_exit(
        config, db_path,
        lambda conn: RecipeRepository(conn).get_by_id(recipe_id),
        "Could not read catalogue",
    )

    if detail is None:
        typer.echo(f"[ERROR] Recipe {recipe_id} not found.", err=True)
        raise typer.Exit(code=1)
    if as_json:
        typer.echo(json.dumps(detail.model_dump(mode="json"), indent=2))
    else:
        typer.echo(format_recipe_detail(detail))


@app.command("delete-recipe")
def delete_recipe(
    recipe_id: int = typer.Argument(..., help="Recipe id."),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Delete a recipe and its materials."""
    from craft_calculator.db.repositories.recipe_repo import RecipeRepository

    config = _setup(config_path)
    deleted = _catalogue_call_or_exit(
        config, db_path,
        lambda conn: RecipeRepository(conn).delete(recipe_id),
        "Delete failed",
    )

    if not deleted:
        typer.echo(f"[ERROR] Recipe {recipe_id} not found.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[OK] Recipe {recipe_id} deleted.")


@app.command("sell-price")
def sell_price(
    name: str = typer.Argument(..., help="Exact recipe name (case-sensitive)."),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Print the NPC sell price of a recipe by name."""
    from craft_calculator.db.repositories.recipe_repo import RecipeRepository

    config = _setup(config_path)
    price = _catalogue_call_or_exit(
        config, db_path,
        lambda conn: RecipeRepository(conn).get_sell_price(name),
        "Could not read catalogue",
    )

    if price is None:
        typer.echo(f"[ERROR] Recipe '{name}' not found.", err=True)
        raise typer.Exit(code=1)
    typer.echo(str(price))


@app.command("by-material")
def by_material(
    material_name: str = typer.Argument(..., help="Material name (case-insensitive)."),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
) -> None:
    """List recipes that use a given material."""
    from craft_calculator.engine.catalogue_view import recipes_using_material
    from craft_calculator.reporting.formatters import format_recipe_list

    config = _setup(config_path)
    if not material_name.strip():
        typer.echo("[ERROR] Material name is required.", err=True)
        raise typer.Exit(code=1)

    snapshot = _load_snapshot_or_exit(config, db_path)
    details = recipes_using_material(snapshot.recipes, snapshot.material_lines, material_name)
    table = format_recipe_list(details, title=f"Recipes using '{material_name}'")
    _emit(config, details, table, as_json, None)


# ── Analytical commands ───────────────────────────────────────────────────────

@app.command("craftable")
def craftable(
    have: Optional[list[str]] = _HAVE_OPT,
    inventory_file: Optional[str] = _INVENTORY_OPT,
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Which recipes can be crafted right now, and how many times?"""
    from craft_calculator.engine.feasibility import compute_feasibility
    from craft_calculator.reporting.formatters import format_craftable_table

    config = _setup(config_path)
    inventory = _build_inventory_or_exit(have, inventory_file)
    snapshot = _load_snapshot_or_exit(config, db_path)
    results = compute_feasibility(snapshot.recipes, snapshot.material_lines, inventory)
    _emit(config, results, format_craftable_table(results), as_json, output)


@app.command("analyze")
def analyze(
    have: Optional[list[str]] = _HAVE_OPT,
    inventory_file: Optional[str] = _INVENTORY_OPT,
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Show every recipe touching your materials and what is still missing.

    With no materials given, every recipe is analyzed.
    """
    from craft_calculator.engine.feasibility import analyze_potential_crafts
    from craft_calculator.reporting.formatters import format_analysis_report

    config = _setup(config_path)
    inventory = _build_inventory_or_exit(have, inventory_file)
    snapshot = _load_snapshot_or_exit(config, db_path)
    results = analyze_potential_crafts(snapshot.recipes, snapshot.material_lines, inventory)
    _emit(config, results, format_analysis_report(results), as_json, output)


@app.command("profit")
def profit(
    top: Optional[int] = typer.Option(
        None, "--top", help="Rows to show (default: config report.top_n)."
    ),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Rank recipes by NPC profit (sell price minus purchasable material cost)."""
    from craft_calculator.engine.profitability import rank_by_profitability
    from craft_calculator.reporting.formatters import format_profit_table

    config = _setup(config_path)
    snapshot = _load_snapshot_or_exit(config, db_path)
    results = rank_by_profitability(snapshot.recipes, snapshot.material_lines)
    table = format_profit_table(results, top_n=top or config.report.top_n)
    _emit(config, results, table, as_json, output)


@app.command("filter-profile")
def filter_profile(
    types: str = typer.Option(
        ..., "--types", "-t", help="Comma-separated material types, e.g. 'drop,buy'."
    ),
    match: str = typer.Option(
        "exclusive", "--match", "-m",
        help="exclusive | contains_any | contains_all | not_contains_any",
    ),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Filter recipes by the acquisition types of their materials."""
    from craft_calculator.engine.errors import InvalidProfile
    from craft_calculator.engine.profile_filter import filter_by_material_profile
    from craft_calculator.reporting.formatters import format_recipe_list

    config = _setup(config_path)
    snapshot = _load_snapshot_or_exit(config, db_path)
    try:
        results = filter_by_material_profile(
            snapshot.recipes, snapshot.material_lines, types, match
        )
    except InvalidProfile as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    table = format_recipe_list(results, title=f"Recipes [{match}: {types}]")
    _emit(config, results, table, as_json, output)


@app.command("usage")
def usage(
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Case-insensitive part of a material name."
    ),
    types: Optional[str] = typer.Option(
        None, "--types", "-t", help="Comma-separated material types."
    ),
    db_path: Optional[str] = _DB_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    as_json: bool = _JSON_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Summarize material demand across all recipes.

    With --name, a reference NPC price is attached (highest price seen for
    that material across recipes; a heuristic, not a market price).
    """
    from craft_calculator.engine.usage import summarize_usage
    from craft_calculator.reporting.formatters import format_usage_table

    config = _setup(config_path)
    snapshot = _load_snapshot_or_exit(config, db_path)
    results = summarize_usage(snapshot.material_lines, name_filter=name, type_filter=types)
    _emit(config, results, format_usage_table(results), as_json, output)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
