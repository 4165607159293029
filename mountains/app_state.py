# mountains/app_state.py
"""
In-memory application state and the field edits the UI performs on it.

Each action mutates the record for the selected date and returns that full
record, ready to be handed to StoreManager.save(). Actions that end up
changing nothing return None.
"""
import logging
import math
from datetime import date
from typing import Callable, List, Optional

from mountains.utils.db.models import DailyLog, FoodEntry
from mountains.utils.error_handler import ValidationError

logger = logging.getLogger(__name__)


class AppState:
    def __init__(self, daily_logs: Optional[List[DailyLog]] = None,
                 selected_date: Optional[date] = None):
        self.daily_logs: List[DailyLog] = sorted(
            daily_logs or [], key=lambda log: log.date, reverse=True)
        self.selected_date: date = selected_date or date.today()

    def get_daily_log(self, day: date) -> Optional[DailyLog]:
        for log in self.daily_logs:
            if log.date == day:
                return log
        return None

    def get_or_create_daily_log(self, day: date) -> DailyLog:
        log = self.get_daily_log(day)
        if log is None:
            log = DailyLog(date=day)
            self.daily_logs.append(log)
            self.daily_logs.sort(key=lambda l: l.date, reverse=True)
        return log

    def remove_daily_log(self, day: date) -> bool:
        before = len(self.daily_logs)
        self.daily_logs = [log for log in self.daily_logs if log.date != day]
        return len(self.daily_logs) != before

    @property
    def selected_log(self) -> DailyLog:
        return self.get_or_create_daily_log(self.selected_date)


# ─── Input parsing ──────────────────────────────────────────────────────────


def parse_optional_float(text: str, field_name: str) -> Optional[float]:
    text = (text or "").strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number, got {text!r}")
    # nan and inf cannot be stored; sqlite turns nan into NULL
    if not math.isfinite(value):
        raise ValidationError(f"{field_name} must be a finite number, got {text!r}")
    return value


def parse_optional_int(text: str, field_name: str) -> Optional[int]:
    text = (text or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be a whole number, got {text!r}")


def _optional_text(text: str) -> Optional[str]:
    return text if text and text.strip() else None


# ─── Actions ────────────────────────────────────────────────────────────────


def add_food(state: AppState, name: str, notes: Optional[str] = None) -> Optional[DailyLog]:
    name = (name or "").strip()
    if not name:
        return None
    log = state.selected_log
    log.add_food_entry(FoodEntry(name=name, notes=notes))
    return log


def update_food(state: AppState, index: int, name: str) -> Optional[DailyLog]:
    name = (name or "").strip()
    log = state.get_daily_log(state.selected_date)
    if not name or log is None or not 0 <= index < len(log.food_entries):
        return None
    log.food_entries[index].name = name
    return log


def delete_food(state: AppState, index: int) -> Optional[DailyLog]:
    log = state.get_daily_log(state.selected_date)
    if log is None or not 0 <= index < len(log.food_entries):
        return None
    log.remove_food_entry(index)
    return log


def add_sokay(state: AppState, text: str) -> Optional[DailyLog]:
    text = (text or "").strip()
    if not text:
        return None
    log = state.selected_log
    log.add_sokay_entry(text)
    return log


def update_sokay(state: AppState, index: int, text: str) -> Optional[DailyLog]:
    text = (text or "").strip()
    log = state.get_daily_log(state.selected_date)
    if not text or log is None or not 0 <= index < len(log.sokay_entries):
        return None
    log.sokay_entries[index] = text
    return log


def delete_sokay(state: AppState, index: int) -> Optional[DailyLog]:
    log = state.get_daily_log(state.selected_date)
    if log is None or not 0 <= index < len(log.sokay_entries):
        return None
    log.remove_sokay_entry(index)
    return log


def update_weight(state: AppState, text: str) -> DailyLog:
    value = parse_optional_float(text, "Weight")
    log = state.selected_log
    log.weight = value
    return log


def update_waist(state: AppState, text: str) -> DailyLog:
    value = parse_optional_float(text, "Waist")
    log = state.selected_log
    log.waist = value
    return log


def update_miles(state: AppState, text: str) -> DailyLog:
    value = parse_optional_float(text, "Miles")
    log = state.selected_log
    log.miles_covered = value
    return log


def update_elevation(state: AppState, text: str) -> DailyLog:
    value = parse_optional_int(text, "Elevation")
    log = state.selected_log
    log.elevation_gain = value
    return log


def update_strength_mobility(state: AppState, text: str) -> DailyLog:
    log = state.selected_log
    log.strength_mobility = _optional_text(text)
    return log


def update_notes(state: AppState, text: str) -> DailyLog:
    log = state.selected_log
    log.notes = _optional_text(text)
    return log


class DailyLogService:
    """
    Glue between the UI and the store: apply an action to the in-memory
    state, then hand the full record to the store manager's writer.
    """

    def __init__(self, state: AppState, manager):
        self.state = state
        self.manager = manager

    def apply(self, action: Callable[..., Optional[DailyLog]], *args):
        log = action(self.state, *args)
        if log is None:
            return None
        return self.manager.save(log)

    def delete_day(self, day: date):
        self.state.remove_daily_log(day)
        return self.manager.delete(day)
