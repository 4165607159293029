# mountains/utils/db/db_helper.py
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

# ───────────────────────────────────────────────────────────────────────────────
# Connections
# ───────────────────────────────────────────────────────────────────────────────


def connect_local(db_path: Union[str, Path], timeout: float = 30.0) -> sqlite3.Connection:
    """
    Open a local-only store handle.

    The handle is created on the caller's thread and then owned by the
    store's writer thread, so the same-thread check is off; the writer
    guarantees only one thread ever uses it at a time.
    """
    conn = sqlite3.connect(str(db_path), timeout=timeout, check_same_thread=False)
    enable_foreign_keys(conn)
    return conn


def enable_foreign_keys(conn) -> None:
    """ON DELETE CASCADE on the child tables only fires with this set."""
    conn.execute("PRAGMA foreign_keys = ON")


# ───────────────────────────────────────────────────────────────────────────────
# Transactions
# ───────────────────────────────────────────────────────────────────────────────


@contextmanager
def transaction(conn):
    """
    Yields the connection inside one transaction:
      • will COMMIT on normal exit,
      • ROLLBACK on exception (and re-raise).
    Works for both sqlite3 and libsql handles.
    """
    try:
        yield conn
        conn.commit()
    except Exception:
        try:
            conn.rollback()
        except Exception:
            logger.exception("Rollback failed")
        raise


def query_all(conn, sql: str, params: Sequence[Any] = ()) -> List[Tuple]:
    return list(conn.execute(sql, tuple(params)).fetchall())


def table_columns(conn, table: str) -> List[str]:
    return [row[1] for row in query_all(conn, f"PRAGMA table_info({table})")]
