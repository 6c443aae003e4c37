"""SQLite implementation of the key-value store."""

from datetime import datetime, timezone
from pathlib import Path

from .base import KeyValueStore
from .connection import get_connection, DEFAULT_DB_PATH


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite implementation of KeyValueStore."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get(self, key: str) -> str | None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT value FROM key_value WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO key_value (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("DELETE FROM key_value WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
