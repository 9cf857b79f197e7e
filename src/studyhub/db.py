"""Key-value storage of JSON documents in a local SQLite file."""
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from studyhub.errors import StorageFailure

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = str(Path.home() / ".studyhub" / "studyhub.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the store table if it doesn't exist."""
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = get_connection(db_path)
        conn.executescript(SCHEMA)
        conn.commit()
        conn.close()
    except (OSError, sqlite3.Error) as e:
        raise StorageFailure(f"Could not open {db_path}: {e}") from e


def has_key(db_path: str, key: str) -> bool:
    """Return whether ``key`` is stored. Raises StorageFailure if the store cannot be read."""
    try:
        conn = get_connection(db_path)
        try:
            row = conn.execute("SELECT 1 FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageFailure(f"Could not read {key!r}: {e}") from e
    return row is not None


def load(db_path: str, key: str, fallback=None):
    """Return the decoded value stored under ``key``.

    A missing key, a value that is not valid JSON, or any SQLite error while
    reading all yield ``fallback``. This function never raises.
    """
    try:
        conn = get_connection(db_path)
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning("Could not read %r from %s: %s", key, db_path, e)
        return fallback
    if row is None:
        return fallback
    try:
        value = json.loads(row["value"])
    except (TypeError, ValueError) as e:
        logger.warning("Stored value for %r is not valid JSON, using fallback: %s", key, e)
        return fallback
    # null is treated like a missing key
    return fallback if value is None else value


def save(db_path: str, key: str, value) -> None:
    """Serialize ``value`` and write it under ``key``.

    Raises StorageFailure if the value cannot be encoded or written.
    """
    try:
        payload = json.dumps(value)
    except (TypeError, ValueError) as e:
        raise StorageFailure(f"Could not encode value for {key!r}: {e}") from e
    try:
        conn = get_connection(db_path)
        try:
            conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, payload, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error("Write of %r to %s failed: %s", key, db_path, e)
        raise StorageFailure(f"Could not write {key!r}: {e}") from e


def delete(db_path: str, key: str) -> bool:
    """Remove ``key`` from the store. Returns whether a row was deleted."""
    try:
        conn = get_connection(db_path)
        try:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageFailure(f"Could not delete {key!r}: {e}") from e
    return cursor.rowcount > 0
