"""
SQLite connection management for the recipe catalogue.

``get_connection()`` yields a connection that:
  - Enforces foreign keys, so deleting a recipe cascades to its materials.
  - Optionally uses WAL journal mode.
  - Waits ``busy_timeout_ms`` on lock contention.
  - Uses the ``sqlite3.Row`` factory (dict-like rows).
  - Commits on clean exit and rolls back on exception, so a recipe and its
    material lines are always written together or not at all.
  - Applies the catalogue schema first when ``ensure_schema=True``.

Usage::

    from craft_calculator.db.connection import get_connection

    with get_connection("data/db/craft_calculator.db", ensure_schema=True) as conn:
        snapshot = load_snapshot(conn)
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from craft_calculator.db.schema import apply_schema

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
    ensure_schema: bool = False,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a configured SQLite connection.

    Args:
        db_path: Path to the SQLite file (parent dirs are created), or
            ``":memory:"``.
        wal_mode: Enable WAL journal mode.
        busy_timeout_ms: Lock wait before ``OperationalError``.
        ensure_schema: Run ``apply_schema()`` before yielding.

    Yields:
        An open, configured ``sqlite3.Connection``.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or is locked.
    """
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    logger.debug("Opening catalogue database %s", db_path)
    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row

    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")
        if wal_mode and db_path != ":memory:":
            conn.execute("PRAGMA journal_mode = WAL;")
        if ensure_schema:
            apply_schema(conn)

        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        raise

    finally:
        conn.close()
