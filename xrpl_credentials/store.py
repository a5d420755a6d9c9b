"""
Key/value handoff store — SQLite.

Separate scripts in a credential workflow need to pass values to each
other: the issuing step produces a credential id that a later payment
step must cite. KeyValueStore is that handoff, a single SQLite table of
string keys to string values.

The credential, deposit-auth and payment clients never touch it; the
calling code decides what to persist.

Invariants:
    - ``set`` overwrites; the latest value wins.
    - Every write records an RFC3339 UTC ``updated_at``.
    - ":memory:" stores live for the lifetime of the object.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

# Conventional key for the most recently issued credential id.
CREDENTIAL_ID_KEY = "credential_id"

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv_entries (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def _now_utc() -> str:
    """RFC3339 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S+00:00")


class KeyValueStore:
    """String key/value storage backed by SQLite.

    Args:
        db_path: Path to SQLite database file, or ":memory:" for in-memory.

    Example:
        store = KeyValueStore("credentials.db")
        store.set(CREDENTIAL_ID_KEY, credential_id)
        credential_id = store.get(CREDENTIAL_ID_KEY)
    """

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self._db_path = str(db_path)
        if self._db_path == ":memory:":
            self._persistent_conn: sqlite3.Connection | None = sqlite3.connect(
                ":memory:", check_same_thread=False
            )
        else:
            self._persistent_conn = None
        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        if self._persistent_conn is not None:
            return self._persistent_conn
        conn = sqlite3.connect(self._db_path)
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._get_conn()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            if self._persistent_conn is None:
                conn.close()

    def _init_schema(self) -> None:
        with self._transaction() as conn:
            conn.executescript(_SCHEMA)

    def get(self, key: str, default: str | None = None) -> str | None:
        with self._transaction() as conn:
            row = conn.execute("SELECT value FROM kv_entries WHERE key = ?", (key,)).fetchone()
        return row[0] if row is not None else default

    def set(self, key: str, value: str, *, updated_at: str | None = None) -> None:
        if not key:
            raise ValueError("key must be non-empty")
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO kv_entries (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, updated_at or _now_utc()),
            )

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
        return cursor.rowcount > 0

    def keys(self) -> list[str]:
        with self._transaction() as conn:
            rows = conn.execute("SELECT key FROM kv_entries ORDER BY key").fetchall()
        return [row[0] for row in rows]

    def updated_at(self, key: str) -> str | None:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT updated_at FROM kv_entries WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row is not None else None
