# =============================================================================
# fieldsync_core/storage/local_store.py
# SQLite Key-Value Store
# =============================================================================
"""
KeyValueStore - durable string key/value storage backed by SQLite.

Features:
- Survives process restarts (single file on disk)
- Multi-key writes and removals in one transaction
- Thread-safe operations (thread-local connections, serialized writers)
"""

from __future__ import annotations
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from fieldsync_core.errors import StorageError
from fieldsync_core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore:
    """
    Persisted key-value store.

    A missing key is a normal state and reads back as None.

    Usage:
        store = KeyValueStore(Path("local_data/fieldsync.db"))
        store.set_many({"token": "abc", "user": "{...}"})
        store.get_many(["token", "user"])
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._write_lock = threading.Lock()
        self._initialize()

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            try:
                self._local.connection = sqlite3.connect(
                    str(self.db_path),
                    check_same_thread=False,
                    timeout=10,
                )
            except sqlite3.Error as e:
                raise StorageError(f"Cannot open local store at {self.db_path}: {e}")
        return self._local.connection

    @contextmanager
    def transaction(self):
        """Context manager for write transactions."""
        with self._write_lock:
            conn = self._get_connection()
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Local store write failed: {e}")
            except Exception:
                conn.rollback()
                raise

    def _initialize(self) -> None:
        with self.transaction() as conn:
            conn.execute(self.SCHEMA)
        logger.debug(f"Key-value store ready at: {self.db_path}")

    # =========================================================================
    # READS
    # =========================================================================

    def get(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        return self.get_many([key]).get(key)

    def get_many(self, keys: Iterable[str]) -> Dict[str, Optional[str]]:
        """
        Read several keys in one statement.

        Returns a dict with an entry for every requested key; missing keys
        map to None.
        """
        keys = list(keys)
        result: Dict[str, Optional[str]] = {key: None for key in keys}
        if not keys:
            return result

        placeholders = ", ".join("?" for _ in keys)
        try:
            rows = self._get_connection().execute(
                f"SELECT key, value FROM kv_store WHERE key IN ({placeholders})",
                keys,
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Local store read failed: {e}", key=",".join(keys))

        for key, value in rows:
            result[key] = value
        return result

    # =========================================================================
    # WRITES
    # =========================================================================

    def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, str]) -> None:
        """Store several keys atomically."""
        now = datetime.now().isoformat()
        with self.transaction() as conn:
            conn.executemany(
                "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at",
                [(key, value, now) for key, value in items.items()],
            )

    def remove(self, key: str) -> None:
        """Remove key; removing a missing key is a no-op."""
        self.remove_many([key])

    def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several keys atomically."""
        keys = list(keys)
        if not keys:
            return
        with self.transaction() as conn:
            conn.executemany(
                "DELETE FROM kv_store WHERE key = ?",
                [(key,) for key in keys],
            )

    def close(self) -> None:
        """Close this thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None


_stores: Dict[Path, KeyValueStore] = {}
_stores_lock = threading.Lock()


def get_key_value_store(db_path: Path) -> KeyValueStore:
    """Get the shared store for a database file."""
    path = Path(db_path).resolve()
    with _stores_lock:
        if path not in _stores:
            _stores[path] = KeyValueStore(path)
        return _stores[path]
