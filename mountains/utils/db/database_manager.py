# mountains/utils/db/database_manager.py
import logging
import sqlite3
from pathlib import Path
from typing import Union

from mountains.utils.db.db_helper import connect_local, query_all, table_columns
from mountains.utils.error_handler import SchemaError, StoreIOError

logger = logging.getLogger(__name__)

DB_FILENAME = "mountains.db"

CORE_TABLES = ("daily_logs", "food_entries", "sokay_entries")

# One statement per entry: libsql handles have no executescript().
SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS daily_logs (
        date TEXT PRIMARY KEY,
        weight REAL,
        waist REAL,
        miles_covered REAL,
        elevation_gain INTEGER,
        strength_mobility TEXT,
        notes TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS food_entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        name TEXT NOT NULL,
        notes TEXT,
        FOREIGN KEY (date) REFERENCES daily_logs(date) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sokay_entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        entry_text TEXT NOT NULL,
        FOREIGN KEY (date) REFERENCES daily_logs(date) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_food_entries_date ON food_entries(date)",
    "CREATE INDEX IF NOT EXISTS idx_sokay_entries_date ON sokay_entries(date)",
)

# Columns that stores written by earlier versions may be missing.
ADDED_COLUMNS = {
    "miles_covered": "REAL",
    "elevation_gain": "INTEGER",
    "strength_mobility": "TEXT",
}


def resolve_db_path(data_dir: Union[str, Path]) -> Path:
    return Path(data_dir) / DB_FILENAME


def initialize_schema(conn) -> None:
    """
    Create the three tables and the two child-table indexes.

    Safe to run against an already-initialized store: every statement is
    IF NOT EXISTS and missing columns are only added when PRAGMA table_info
    says they are absent.
    """
    try:
        for stmt in SCHEMA_STATEMENTS:
            conn.execute(stmt)

        existing = set(table_columns(conn, "daily_logs"))
        for col, dtype in ADDED_COLUMNS.items():
            if col not in existing:
                logger.info("Migrating database: adding daily_logs.%s", col)
                conn.execute(f"ALTER TABLE daily_logs ADD COLUMN {col} {dtype}")
        conn.commit()
    except Exception as e:
        logger.error("Schema initialization error: %s", e, exc_info=True)
        raise SchemaError(f"Failed to initialize schema: {e}") from e


def open_local_store(data_dir: Union[str, Path]) -> sqlite3.Connection:
    """
    Open (creating if needed) the local database file inside data_dir and
    apply the schema. Local disk only, never touches the network, so the UI
    can block its first frame on it.
    """
    data_dir = Path(data_dir)
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StoreIOError(f"Cannot create data directory {data_dir}: {e}") from e

    db_path = resolve_db_path(data_dir)
    try:
        conn = connect_local(db_path)
    except sqlite3.Error as e:
        raise StoreIOError(f"Cannot open database {db_path}: {e}") from e

    try:
        initialize_schema(conn)
    except SchemaError:
        conn.close()
        raise
    logger.debug("Local store ready at %s", db_path)
    return conn


def is_initialized(db_path: Union[str, Path]) -> bool:
    """Check if database exists and has the core tables"""
    db_path = Path(db_path)
    if not db_path.exists():
        return False
    try:
        conn = sqlite3.connect(str(db_path))
        try:
            rows = query_all(conn, "SELECT name FROM sqlite_master WHERE type='table'")
        finally:
            conn.close()
    except sqlite3.Error:
        return False
    names = {r[0] for r in rows}
    return all(t in names for t in CORE_TABLES)
