# mountains/utils/stats.py
"""
Running and sokay statistics over already-loaded daily logs.
"""
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from mountains.utils.db.models import DailyLog

ELEVATION_THRESHOLD = 1000


def _today(today: Optional[date]) -> date:
    return today or date.today()


def calculate_yearly_miles(logs: Iterable[DailyLog], today: Optional[date] = None) -> float:
    year = _today(today).year
    total = sum(log.miles_covered for log in logs
                if log.date.year == year and log.miles_covered is not None)
    return round(total, 1)


def calculate_monthly_miles(logs: Iterable[DailyLog], today: Optional[date] = None) -> float:
    now = _today(today)
    total = sum(log.miles_covered for log in logs
                if (log.date.year, log.date.month) == (now.year, now.month)
                and log.miles_covered is not None)
    return round(total, 1)


def calculate_yearly_elevation(logs: Iterable[DailyLog], today: Optional[date] = None) -> int:
    year = _today(today).year
    return sum(log.elevation_gain for log in logs
               if log.date.year == year and log.elevation_gain is not None)


def count_monthly_1000_days(logs: Iterable[DailyLog], today: Optional[date] = None) -> int:
    now = _today(today)
    return sum(1 for log in logs
               if (log.date.year, log.date.month) == (now.year, now.month)
               and (log.elevation_gain or 0) >= ELEVATION_THRESHOLD)


def calculate_current_streak(logs: Sequence[DailyLog]) -> Optional[int]:
    """
    Consecutive 1000+ ft days counting back from the most recent logged day.
    Streaks shorter than two days are not reported.
    """
    if not logs:
        return None
    by_date = {log.date: log for log in logs}
    current = max(by_date)
    streak = 0
    while current in by_date and (by_date[current].elevation_gain or 0) >= ELEVATION_THRESHOLD:
        streak += 1
        current -= timedelta(days=1)
    return streak if streak >= 2 else None


def get_streak_message(logs: Sequence[DailyLog]) -> str:
    streak = calculate_current_streak(logs)
    if streak:
        return f"You currently have {streak} consecutive days of 1000+ vert!"
    return "Think about starting a streak of 1000+ feet of gain."


def calculate_cumulative_sokay(logs: Iterable[DailyLog], up_to: date) -> int:
    return sum(len(log.sokay_entries) for log in logs if log.date <= up_to)
