# mountains/utils/db/__init__.py

"""
Local store bootstrap, schema, daily log repository, replica upgrade and
the StoreManager that ties them together.
"""

# ─── Core connection helpers ────────────────────────────────────────────────────
from mountains.utils.db.db_helper import (
    connect_local,
    enable_foreign_keys,
    transaction,
    query_all,
)

# ─── Schema management ───────────────────────────────────────────────────────────
from mountains.utils.db.database_manager import (
    DB_FILENAME,
    resolve_db_path,
    open_local_store,
    initialize_schema,
    is_initialized,
)

# ─── Data models ────────────────────────────────────────────────────────────────
from mountains.utils.db.models import DailyLog, FoodEntry

# ─── State, repository, replica, manager ────────────────────────────────────────
from mountains.utils.db.connection_state import (
    ConnectionState,
    ConnectionStateCell,
    ConnectionStatus,
    SyncStatus,
    sync_status_for,
)
from mountains.utils.db import daily_log_repository
from mountains.utils.db.replica import is_replica, upgrade_to_remote_replica
from mountains.utils.db.store_manager import StoreManager

# ─── Public API ─────────────────────────────────────────────────────────────────
__all__ = [
    "connect_local",
    "enable_foreign_keys",
    "transaction",
    "query_all",
    "DB_FILENAME",
    "resolve_db_path",
    "open_local_store",
    "initialize_schema",
    "is_initialized",
    "DailyLog",
    "FoodEntry",
    "ConnectionState",
    "ConnectionStateCell",
    "ConnectionStatus",
    "SyncStatus",
    "sync_status_for",
    "daily_log_repository",
    "is_replica",
    "upgrade_to_remote_replica",
    "StoreManager",
]
