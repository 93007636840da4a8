"""
Key-value persistence for JSON documents.

Each bucket (workouts, goals, custom types, user, rest days) is stored as a
single JSON-serialized blob under its key. Reads and writes never raise: any
I/O or decoding problem is logged and returned as a failed Result, so a
corrupted store behaves like an empty one.
"""
import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional, Protocol

from .config import get_settings
from .results import Result

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal contract every store backend satisfies."""

    def get(self, key: str) -> Result[Any]:
        ...

    def set(self, key: str, value: Any) -> Result[bool]:
        ...

    def remove(self, key: str) -> Result[bool]:
        ...


class SQLiteStore:
    """
    SQLite-backed key-value store.

    Uses a single ``kv`` table and opens a short-lived connection per call,
    so the file can be shared with other processes reading the same data.
    """

    TABLE = "kv"

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_settings().store_path

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self.TABLE} "
                "(key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
            yield conn
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> Result[Any]:
        """Read and decode the JSON document stored under ``key``."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT value FROM {self.TABLE} WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"[STORE] Database error reading {key}: {e}")
            return Result.failure(f"read failed: {e}")

        if row is None:
            return Result.success(None)

        try:
            return Result.success(json.loads(row[0]))
        except json.JSONDecodeError as e:
            logger.error(f"[STORE] Corrupt JSON under {key}: {e}")
            return Result.failure(f"parse failed: {e}")

    def set(self, key: str, value: Any) -> Result[bool]:
        """Serialize ``value`` and write it under ``key``."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"[STORE] Cannot serialize value for {key}: {e}")
            return Result.failure(f"serialize failed: {e}", False)

        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT OR REPLACE INTO {self.TABLE} (key, value) VALUES (?, ?)",
                    (key, payload),
                )
        except sqlite3.Error as e:
            logger.error(f"[STORE] Database error writing {key}: {e}")
            return Result.failure(f"write failed: {e}", False)

        logger.debug(f"[STORE] Wrote {len(payload)} bytes to {key}")
        return Result.success(True)

    def remove(self, key: str) -> Result[bool]:
        """Delete ``key``; removing a missing key still succeeds."""
        try:
            with self._connect() as conn:
                conn.execute(f"DELETE FROM {self.TABLE} WHERE key = ?", (key,))
        except sqlite3.Error as e:
            logger.error(f"[STORE] Database error removing {key}: {e}")
            return Result.failure(f"remove failed: {e}", False)
        return Result.success(True)


class MemoryStore:
    """In-process store; values are kept serialized to mirror SQLiteStore."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    def get(self, key: str) -> Result[Any]:
        raw = self._data.get(key)
        if raw is None:
            return Result.success(None)
        try:
            return Result.success(json.loads(raw))
        except json.JSONDecodeError as e:
            logger.error(f"[STORE] Corrupt JSON under {key}: {e}")
            return Result.failure(f"parse failed: {e}")

    def set(self, key: str, value: Any) -> Result[bool]:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"[STORE] Cannot serialize value for {key}: {e}")
            return Result.failure(f"serialize failed: {e}", False)
        return Result.success(True)

    def remove(self, key: str) -> Result[bool]:
        self._data.pop(key, None)
        return Result.success(True)

    def set_raw(self, key: str, raw: str) -> None:
        """Store an undecoded string as-is (used to simulate corruption)."""
        self._data[key] = raw
