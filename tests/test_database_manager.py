# tests/test_database_manager.py

import sqlite3

import pytest

from mountains.utils.db import database_manager as dbman
from mountains.utils.db.db_helper import query_all, table_columns
from mountains.utils.error_handler import SchemaError, StoreIOError


def _names(conn, kind):
    return {r[0] for r in query_all(
        conn, "SELECT name FROM sqlite_master WHERE type = ?", (kind,))}


def test_open_local_store_creates_dir_file_and_schema(data_dir):
    """
    Opening a store in a directory that does not exist yet creates the
    directory, the database file, all three tables and both indexes.
    """
    assert not data_dir.exists()
    conn = dbman.open_local_store(data_dir)
    try:
        assert (data_dir / dbman.DB_FILENAME).exists()
        assert set(dbman.CORE_TABLES) <= _names(conn, "table")
        assert {"idx_food_entries_date", "idx_sokay_entries_date"} <= _names(conn, "index")
    finally:
        conn.close()


def test_foreign_keys_enabled_on_local_handle(store_conn):
    assert query_all(store_conn, "PRAGMA foreign_keys")[0][0] == 1


def test_initialize_schema_is_idempotent(store_conn):
    """Running the schema again against an initialized store changes nothing."""
    before = sorted(_names(store_conn, "table") | _names(store_conn, "index"))
    dbman.initialize_schema(store_conn)
    dbman.initialize_schema(store_conn)
    after = sorted(_names(store_conn, "table") | _names(store_conn, "index"))
    assert before == after


def test_reopen_keeps_existing_rows(data_dir):
    conn = dbman.open_local_store(data_dir)
    conn.execute("INSERT INTO daily_logs (date, weight) VALUES ('2024-06-01', 180.0)")
    conn.commit()
    conn.close()

    conn = dbman.open_local_store(data_dir)
    try:
        rows = query_all(conn, "SELECT date, weight FROM daily_logs")
        assert rows == [("2024-06-01", 180.0)]
    finally:
        conn.close()


def test_old_store_gets_missing_columns(data_dir):
    """
    A daily_logs table written before miles/elevation/strength existed is
    upgraded in place and keeps its data.
    """
    data_dir.mkdir(parents=True)
    old = sqlite3.connect(str(data_dir / dbman.DB_FILENAME))
    old.execute("CREATE TABLE daily_logs (date TEXT PRIMARY KEY, weight REAL, waist REAL, notes TEXT)")
    old.execute("INSERT INTO daily_logs VALUES ('2023-01-02', 200.5, 36.0, 'old')")
    old.commit()
    old.close()

    conn = dbman.open_local_store(data_dir)
    try:
        cols = table_columns(conn, "daily_logs")
        for col in dbman.ADDED_COLUMNS:
            assert col in cols
        rows = query_all(conn, "SELECT weight, notes, miles_covered FROM daily_logs")
        assert rows == [(200.5, "old", None)]
    finally:
        conn.close()


def test_unwritable_data_dir_raises_store_io_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")
    with pytest.raises(StoreIOError):
        dbman.open_local_store(blocker / "data")


def test_schema_failure_raises_schema_error():
    class BrokenConn:
        def execute(self, *a, **k):
            raise sqlite3.OperationalError("disk I/O error")

    with pytest.raises(SchemaError):
        dbman.initialize_schema(BrokenConn())


def test_is_initialized(data_dir):
    db_path = dbman.resolve_db_path(data_dir)
    assert dbman.is_initialized(db_path) is False

    dbman.open_local_store(data_dir).close()
    assert dbman.is_initialized(db_path) is True
