"""
Settings Database
==================
SQLite key/value storage for setting values.
"""

import sqlite3
import os
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# Types SQLite can bind without conversion; bool is stored as an integer
SCALAR_TYPES = (str, int, float, bytes, type(None))


class SettingsDB:
    """SQLite database for settings storage.

    Every value is kept in a single ``name -> val`` table. The ``val``
    column has no declared type, so integers, floats and text come back
    exactly as they were written. Reads go through an in-memory cache
    that ``all(fresh=True)`` refreshes.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initialize settings database.

        Args:
            db_path: Path to SQLite database. Defaults to data/settings.db
        """
        if db_path is None:
            data_dir = Path(os.getenv("DATA_DIR", "data"))
            data_dir.mkdir(parents=True, exist_ok=True)
            db_path = str(data_dir / "settings.db")

        self.db_path = db_path
        self._cache: Dict[str, Any] = {}
        self._cache_loaded = False
        self._init_database()

    @contextmanager
    def _get_connection(self):
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    name TEXT PRIMARY KEY,
                    val,
                    updated_at TEXT
                )
            """)

    def all(self, fresh: bool = False) -> Dict[str, Any]:
        """Get every stored setting.

        Args:
            fresh: Bypass the cache and re-read the table

        Returns:
            Dict of setting name to raw value
        """
        if fresh or not self._cache_loaded:
            with self._get_connection() as conn:
                cursor = conn.execute("SELECT name, val FROM settings ORDER BY name")
                self._cache = {row["name"]: row["val"] for row in cursor.fetchall()}
            self._cache_loaded = True

        return dict(self._cache)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a raw value, or default when the name is not stored."""
        return self.all().get(name, default)

    def has(self, name: str) -> bool:
        return name in self.all()

    def set(self, name: str, value: Any) -> bool:
        """Insert or replace a setting value.

        Raises:
            TypeError: If the value is not a scalar
        """
        if not isinstance(value, SCALAR_TYPES):
            raise TypeError(
                f"Setting {name} must be stored as a scalar, got {type(value).__name__}"
            )

        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO settings (name, val, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(name) DO UPDATE SET
                       val = excluded.val,
                       updated_at = excluded.updated_at""",
                (name, value, datetime.now().isoformat())
            )

        if self._cache_loaded:
            self._cache[name] = int(value) if isinstance(value, bool) else value
        logger.debug(f"Stored setting {name}")
        return True

    def remove(self, name: str) -> bool:
        """Delete a setting.

        Returns:
            True if a row was deleted
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM settings WHERE name = ?", (name,))
            deleted = cursor.rowcount > 0

        self._cache.pop(name, None)
        logger.debug(f"Removed setting {name}")
        return deleted

    def flush_cache(self):
        """Forget cached values so the next read hits the database."""
        self._cache = {}
        self._cache_loaded = False
