# mountains/utils/db/replica.py
"""
Turning the local-only store into a Turso embedded replica.

libsql cannot adopt a plain SQLite file as a replica, so a first-time
upgrade deletes the local file (plus -wal/-shm) and lets the replica pull a
fresh copy from the remote. Rows that only ever lived locally are lost; the
caller has already loaded them into memory and the markdown backup still
holds every saved day.
"""
import logging
from pathlib import Path
from typing import Callable, List, Union

from mountains.utils.db.connection_state import ConnectionState
from mountains.utils.db.daily_log_repository import count_daily_logs
from mountains.utils.db.database_manager import initialize_schema
from mountains.utils.db.db_helper import enable_foreign_keys
from mountains.utils.error_handler import DatabaseError, SchemaError

logger = logging.getLogger(__name__)

INFO_SUFFIX = "-info"
SIDECAR_SUFFIXES = ("-wal", "-shm")

PathLike = Union[str, Path]
Connector = Callable[[Path, str, str], object]


def replica_info_path(db_path: PathLike) -> Path:
    db_path = Path(db_path)
    return db_path.with_name(db_path.name + INFO_SUFFIX)


def is_replica(db_path: PathLike) -> bool:
    """libsql writes <db>-info next to every embedded replica it manages."""
    return replica_info_path(db_path).exists()


def local_store_files(db_path: PathLike) -> List[Path]:
    db_path = Path(db_path)
    return [db_path] + [db_path.with_name(db_path.name + s) for s in SIDECAR_SUFFIXES]


def remove_local_store(db_path: PathLike) -> List[Path]:
    removed = []
    for path in local_store_files(db_path):
        if path.exists():
            path.unlink()
            removed.append(path)
    return removed


def _discard_partial_replica(db_path: Path) -> None:
    """A failed build may leave a half-made replica behind; start clean."""
    try:
        remove_local_store(db_path)
        info = replica_info_path(db_path)
        if info.exists():
            info.unlink()
    except OSError as e:
        logger.warning("Could not clean up partial replica files: %s", e)


def connect_replica(db_path: PathLike, url: str, token: str):
    """
    Open an embedded replica of the remote database at db_path and pull the
    current remote state once.
    """
    import libsql

    conn = libsql.connect(str(db_path), sync_url=url, auth_token=token)
    conn.sync()
    enable_foreign_keys(conn)
    return conn


def upgrade_to_remote_replica(manager, url: str, token: str,
                              connector: Connector = None) -> bool:
    """
    Replace the manager's local-only handle with a remote replica handle.

    Must run on the manager's writer thread: nothing else touches the handle
    while it is being swapped. Returns True when the store ends up Connected.
    On failure the state becomes Error and the app keeps working locally.
    """
    connector = connector or connect_replica
    cell = manager.state_cell
    db_path = Path(manager.db_path)

    cell.set(ConnectionState.disconnected())

    reset = not is_replica(db_path)
    if reset:
        try:
            local_days = count_daily_logs(manager.connection)
        except DatabaseError:
            local_days = "unknown"
        logger.warning(
            "First cloud upgrade: replacing local-only store %s "
            "(%s local days not yet replicated will be dropped from disk)",
            db_path, local_days)
        manager.close_connection()
        try:
            removed = remove_local_store(db_path)
        except OSError as e:
            logger.error("Could not remove local store files: %s", e)
            cell.set(ConnectionState.error(f"Failed to reset local store: {e}"))
            manager.reopen_local()
            return False
        logger.info("Removed %s", ", ".join(p.name for p in removed) or "nothing")

    try:
        new_conn = connector(db_path, url, token)
    except Exception as e:
        logger.error("Remote replica connection failed: %s", e)
        cell.set(ConnectionState.error(f"Failed to create replica: {e}"))
        if reset:
            _discard_partial_replica(db_path)
            manager.reopen_local()
        return False

    if reset:
        try:
            initialize_schema(new_conn)
        except SchemaError as e:
            new_conn.close()
            cell.set(ConnectionState.error(str(e)))
            manager.reopen_local()
            return False

    manager.replace_connection(new_conn)
    cell.set(ConnectionState.connected())
    logger.info("Store upgraded to remote replica of %s", url)
    return True
