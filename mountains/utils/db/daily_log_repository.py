# mountains/utils/db/daily_log_repository.py
"""
Reads and writes of DailyLog aggregates.

Every function takes the store handle explicitly; StoreManager decides which
thread calls them and which handle (local or replica) they get.
"""
import logging
from datetime import date
from typing import List, Optional

from mountains.utils.db.db_helper import query_all, transaction
from mountains.utils.db.models import DailyLog, daily_log_from_row, format_date
from mountains.utils.error_handler import handle_db_errors

logger = logging.getLogger(__name__)

_DAILY_LOG_COLUMNS = (
    "date, weight, waist, miles_covered, elevation_gain, strength_mobility, notes"
)


@handle_db_errors("save_daily_log")
def save_daily_log(conn, log: DailyLog) -> None:
    """
    Persist one complete DailyLog in a single transaction:
      1. upsert the daily_logs row,
      2. replace all food_entries for the date,
      3. replace all sokay_entries for the date.
    Either all of it lands or none of it does.
    """
    date_str = format_date(log.date)
    with transaction(conn):
        conn.execute(
            f"INSERT OR REPLACE INTO daily_logs ({_DAILY_LOG_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                date_str,
                log.weight,
                log.waist,
                log.miles_covered,
                log.elevation_gain,
                log.strength_mobility,
                log.notes,
            ),
        )

        conn.execute("DELETE FROM food_entries WHERE date = ?", (date_str,))
        for entry in log.food_entries:
            conn.execute(
                "INSERT INTO food_entries (date, name, notes) VALUES (?, ?, ?)",
                (date_str, entry.name, entry.notes),
            )

        conn.execute("DELETE FROM sokay_entries WHERE date = ?", (date_str,))
        for text in log.sokay_entries:
            conn.execute(
                "INSERT INTO sokay_entries (date, entry_text) VALUES (?, ?)",
                (date_str, text),
            )
    logger.debug("Saved daily log %s (%d food, %d sokay)",
                 date_str, len(log.food_entries), len(log.sokay_entries))


def _load_children(conn, date_str: str):
    food_rows = query_all(
        conn, "SELECT name, notes FROM food_entries WHERE date = ? ORDER BY id",
        (date_str,))
    sokay_rows = query_all(
        conn, "SELECT entry_text FROM sokay_entries WHERE date = ? ORDER BY id",
        (date_str,))
    return food_rows, sokay_rows


@handle_db_errors("load_all_daily_logs")
def load_all_daily_logs(conn) -> List[DailyLog]:
    """
    Load every day, newest first, with its entries in insertion order.
    An empty store gives an empty list; a bad stored date raises
    CorruptDataError.
    """
    rows = query_all(
        conn, f"SELECT {_DAILY_LOG_COLUMNS} FROM daily_logs ORDER BY date DESC")
    logs = []
    for row in rows:
        food_rows, sokay_rows = _load_children(conn, row[0])
        logs.append(daily_log_from_row(row, food_rows, sokay_rows))
    return logs


@handle_db_errors("load_daily_log")
def load_daily_log(conn, day: date) -> Optional[DailyLog]:
    date_str = format_date(day)
    rows = query_all(
        conn, f"SELECT {_DAILY_LOG_COLUMNS} FROM daily_logs WHERE date = ?",
        (date_str,))
    if not rows:
        return None
    food_rows, sokay_rows = _load_children(conn, date_str)
    return daily_log_from_row(rows[0], food_rows, sokay_rows)


@handle_db_errors("delete_daily_log")
def delete_daily_log(conn, day: date) -> bool:
    """
    Delete one day. Child rows go with it through ON DELETE CASCADE.
    Returns True if a row was removed.
    """
    date_str = format_date(day)
    with transaction(conn):
        cur = conn.execute("DELETE FROM daily_logs WHERE date = ?", (date_str,))
        removed = cur.rowcount
    logger.debug("Deleted daily log %s (rows=%s)", date_str, removed)
    return bool(removed and removed > 0)


@handle_db_errors("count_daily_logs")
def count_daily_logs(conn) -> int:
    return query_all(conn, "SELECT COUNT(*) FROM daily_logs")[0][0]
