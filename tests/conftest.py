# tests/conftest.py

import sqlite3
from pathlib import Path

import pytest
import typer
from rich.prompt import Confirm

import mountains.config.config_manager as cf
from mountains.utils.db import replica
from mountains.utils.db.database_manager import open_local_store
from mountains.utils.db.store_manager import StoreManager


# ────────────────────────────────────────────────────────────────────────────────
# Fixture: keep every test away from ~/.mountains and real prompts
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def isolate_home(tmp_path, monkeypatch):
    """
    Point BASE_DIR / USER_CONFIG at a temp directory and clear any remote
    credentials the developer may have exported.
    """
    base = tmp_path / "home"
    monkeypatch.setattr(cf, "BASE_DIR", base)
    monkeypatch.setattr(cf, "USER_CONFIG", base / "config.toml")
    monkeypatch.delenv(cf.TURSO_URL_ENV, raising=False)
    monkeypatch.delenv(cf.TURSO_TOKEN_ENV, raising=False)
    yield base


@pytest.fixture(autouse=True)
def _stub_typer_prompts(monkeypatch):
    """
    Silence every interactive question coming from typer.confirm and
    rich.prompt.Confirm.ask so tests run headless.
    """
    monkeypatch.setattr(typer, "confirm", lambda *a, **k: False)
    monkeypatch.setattr(Confirm, "ask", lambda *a, **k: False)
    yield


# ────────────────────────────────────────────────────────────────────────────────
# Store fixtures
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store_conn(data_dir):
    """A bootstrapped local-only sqlite3 handle."""
    conn = open_local_store(data_dir)
    yield conn
    try:
        conn.close()
    except sqlite3.ProgrammingError:
        pass


class SyncSpy:
    """Stands in for conn.sync(); records calls and can be told to fail."""

    def __init__(self):
        self.calls = 0
        self.fail_with = None

    def __call__(self, conn):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with


@pytest.fixture
def sync_spy():
    return SyncSpy()


@pytest.fixture
def manager(data_dir, sync_spy):
    """
    StoreManager over a fresh local store with its writer thread running.
    Syncs go to sync_spy instead of the network.
    """
    mgr = StoreManager.open(data_dir, sync_hook=sync_spy).start()
    yield mgr
    mgr.shutdown(final_sync=False, timeout=5)


# ────────────────────────────────────────────────────────────────────────────────
# Replica stand-in
# ────────────────────────────────────────────────────────────────────────────────

class FakeReplica:
    """
    sqlite3-backed stand-in for a libsql embedded replica: writes the
    <db>-info marker like libsql does and counts sync() calls.
    """

    def __init__(self, db_path):
        self.db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute("PRAGMA foreign_keys = ON")
        replica.replica_info_path(db_path).write_text("{}")
        self.syncs = 0
        self.closed = False

    def execute(self, sql, params=()):
        return self._conn.execute(sql, params)

    def commit(self):
        self._conn.commit()

    def rollback(self):
        self._conn.rollback()

    def close(self):
        self.closed = True
        self._conn.close()

    def sync(self):
        self.syncs += 1


@pytest.fixture
def fake_replica():
    """The FakeReplica class, for use as (or inside) a replica connector."""
    return FakeReplica
