"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

from config import DEFAULT_DB_PATH

SCHEMA_SQL = """
-- Opaque string values addressed by key. Session records are stored as JSON
-- under 'lingosphere-app-data-<email>'.
CREATE TABLE IF NOT EXISTS key_value (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with row factory enabled.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A SQLite connection with Row factory for dict-like access.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema.

    Creates the key-value table if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
