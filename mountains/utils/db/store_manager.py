# mountains/utils/db/store_manager.py
"""
StoreManager: owner of the store handle and the connection state.

After bootstrap, one writer thread is the only code that touches the handle.
Saves, deletes, syncs and the one-time replica upgrade are all queued to it,
so they run one at a time in the order they were issued and the handle swap
during an upgrade can never race a write. Callers get a Future back and the
foreground loop never waits on disk or network unless it asks to.
"""
import logging
import queue
import threading
from concurrent.futures import Future
from datetime import date
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Union

from mountains.utils.db.connection_state import (
    ConnectionState,
    ConnectionStateCell,
    SyncStatus,
    sync_status_for,
)
from mountains.utils.db import daily_log_repository as repo
from mountains.utils.db.database_manager import (
    initialize_schema,
    open_local_store,
    resolve_db_path,
)
from mountains.utils.db.models import DailyLog, format_date
from mountains.utils.db.replica import is_replica, upgrade_to_remote_replica
from mountains.utils.error_handler import DatabaseError

logger = logging.getLogger(__name__)

_STOP = object()


def _sync_connection(conn) -> None:
    conn.sync()


class StoreManager:
    def __init__(self, data_dir: Union[str, Path], conn,
                 state_cell: Optional[ConnectionStateCell] = None,
                 backup=None,
                 sync_hook: Callable[[object], None] = _sync_connection):
        self.data_dir = Path(data_dir)
        self.db_path = resolve_db_path(self.data_dir)
        self.state_cell = state_cell or ConnectionStateCell()
        self.backup = backup
        self.sync_hook = sync_hook

        self._conn = conn
        self._slot_lock = threading.Lock()
        self._jobs: "queue.Queue" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._upgrade_started = False

    @classmethod
    def open(cls, data_dir: Union[str, Path], **kwargs) -> "StoreManager":
        """Bootstrap the local store synchronously and wrap it."""
        return cls(data_dir, open_local_store(data_dir), **kwargs)

    # ─── Handle slot ─────────────────────────────────────────────────────────

    @property
    def connection(self):
        with self._slot_lock:
            if self._conn is None:
                raise DatabaseError("Store is closed")
            return self._conn

    def replace_connection(self, new_conn) -> None:
        with self._slot_lock:
            old, self._conn = self._conn, new_conn
        if old is not None and old is not new_conn:
            _close_quietly(old)

    def close_connection(self) -> None:
        with self._slot_lock:
            old, self._conn = self._conn, None
        if old is not None:
            _close_quietly(old)

    def reopen_local(self) -> None:
        """Put a fresh local-only handle in the slot (schema applied)."""
        self.replace_connection(open_local_store(self.data_dir))

    # ─── Status ──────────────────────────────────────────────────────────────

    def get_connection_state(self) -> ConnectionState:
        return self.state_cell.get()

    def get_sync_status(self) -> SyncStatus:
        return sync_status_for(self.state_cell.get())

    @property
    def is_replica(self) -> bool:
        return is_replica(self.db_path)

    # ─── Writer thread ───────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "StoreManager":
        if self.running:
            return self
        self._thread = threading.Thread(
            target=self._run, name="mountains-writer", daemon=True)
        self._thread.start()
        return self

    def _run(self) -> None:
        while True:
            job = self._jobs.get()
            try:
                if job is _STOP:
                    return
                fn, future, label = job
                if not future.set_running_or_notify_cancel():
                    continue
                try:
                    future.set_result(fn())
                except Exception as e:
                    logger.error("Background %s failed: %s", label, e, exc_info=True)
                    future.set_exception(e)
            finally:
                self._jobs.task_done()

    def submit(self, fn: Callable, label: str = "job") -> Future:
        """
        Queue fn for the writer. Without a running writer (one-shot CLI
        commands, tests) the job runs inline and the Future is already done.
        """
        future: Future = Future()
        if self.running:
            self._jobs.put((fn, future, label))
            return future
        future.set_running_or_notify_cancel()
        try:
            future.set_result(fn())
        except Exception as e:
            logger.error("%s failed: %s", label, e, exc_info=True)
            future.set_exception(e)
        return future

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every job queued so far has finished."""
        self.submit(lambda: None, "flush").result(timeout)

    # ─── Read path ───────────────────────────────────────────────────────────

    def load_all(self) -> List[DailyLog]:
        return self.submit(lambda: repo.load_all_daily_logs(self.connection),
                           "load").result()

    def load(self, day: date) -> Optional[DailyLog]:
        return self.submit(lambda: repo.load_daily_log(self.connection, day),
                           "load").result()

    def count(self) -> int:
        return self.submit(lambda: repo.count_daily_logs(self.connection),
                           "count").result()

    # ─── Write path ──────────────────────────────────────────────────────────

    def save(self, log: DailyLog) -> Future:
        """
        Persist a snapshot of the whole record in the background.
        The snapshot is taken now, so later in-memory edits cannot leak into
        this write; the last queued save for a date always lands last.
        """
        snapshot = log.copy()
        return self.submit(partial(self._save, snapshot),
                           f"save {format_date(snapshot.date)}")

    def save_now(self, log: DailyLog) -> None:
        self.save(log).result()

    def delete(self, day: date) -> Future:
        return self.submit(partial(self._delete, day), f"delete {format_date(day)}")

    def delete_now(self, day: date) -> bool:
        return self.delete(day).result()

    def _save(self, log: DailyLog) -> None:
        repo.save_daily_log(self.connection, log)
        self._opportunistic_sync()
        if self.backup is not None:
            try:
                self.backup.save_daily_log(log)
            except Exception as e:
                logger.warning("Markdown backup of %s failed: %s", log.date, e)

    def _delete(self, day: date) -> bool:
        removed = repo.delete_daily_log(self.connection, day)
        self._opportunistic_sync()
        if self.backup is not None:
            try:
                self.backup.delete_daily_log(day)
            except Exception as e:
                logger.warning("Markdown backup delete of %s failed: %s", day, e)
        return removed

    # ─── Sync ────────────────────────────────────────────────────────────────

    def _opportunistic_sync(self) -> None:
        """
        Push right after a commit, only when Connected. The row is already
        on local disk, so a failure here is logged and otherwise ignored and
        does not change the connection state.
        """
        if not self.state_cell.get().is_connected:
            return
        try:
            self.sync_hook(self.connection)
        except Exception as e:
            logger.debug("Opportunistic sync failed: %s", e)

    def _sync(self) -> bool:
        if not self.state_cell.get().is_connected:
            return False
        try:
            self.sync_hook(self.connection)
        except Exception as e:
            raise DatabaseError(f"Failed to sync with remote: {e}") from e
        logger.debug("Synced with remote")
        return True

    def request_sync(self) -> Future:
        """Queue a sync; the Future resolves to False when not Connected."""
        return self.submit(self._sync, "sync")

    def sync_now(self) -> bool:
        return self.request_sync().result()

    # ─── Replica upgrade ─────────────────────────────────────────────────────

    def start_replica_upgrade(self, url: str, token: str,
                              connector=None) -> Optional[Future]:
        """
        Queue the one-time upgrade to a remote replica. A second call in the
        same process is refused and returns None.
        """
        if self._upgrade_started:
            logger.warning("Replica upgrade already attempted; ignoring")
            return None
        self._upgrade_started = True
        return self.submit(
            partial(upgrade_to_remote_replica, self, url, token, connector),
            "replica upgrade")

    def reinitialize_schema(self) -> None:
        self.submit(lambda: initialize_schema(self.connection), "schema").result()

    # ─── Shutdown ────────────────────────────────────────────────────────────

    def shutdown(self, final_sync: bool = True, timeout: Optional[float] = None) -> None:
        """
        Drain queued writes, make one best-effort sync, stop the writer and
        close the handle.
        """
        if final_sync:
            try:
                self.request_sync().result(timeout)
            except Exception as e:
                logger.warning("Final sync failed: %s", e)
        if self.running:
            self._jobs.put(_STOP)
            self._thread.join(timeout)
            if self._thread.is_alive():
                # the writer may still hold the handle; closing it now would race
                logger.warning("Writer still busy after %ss; leaving store handle open",
                               timeout)
                return
        self.close_connection()


def _close_quietly(conn) -> None:
    try:
        conn.close()
    except Exception as e:
        logger.debug("Closing store handle failed: %s", e)
