# mountains/ui_views/daily_ui.py
# -------------------------------------------------------------------
# Daily view: one day's measurements, running, food and sokay
# -------------------------------------------------------------------
import curses
import logging
from datetime import timedelta

from mountains import app_state as actions
from mountains.app_state import AppState, DailyLogService
from mountains.ui_views.popups import popup_confirm, popup_error, popup_input
from mountains.ui_views.ui_helpers import safe_addstr
from mountains.utils.db.models import DailyLog
from mountains.utils.error_handler import ValidationError
from mountains.utils.stats import calculate_cumulative_sokay

logger = logging.getLogger(__name__)

FOOD, SOKAY = "food", "sokay"


def _fmt(value, unit=""):
    if value is None:
        return "-"
    text = f"{value:g}" if isinstance(value, float) else str(value)
    return f"{text} {unit}".strip()


def _current_log(state: AppState) -> DailyLog:
    # Viewing a day does not create it; the first edit does.
    return state.get_daily_log(state.selected_date) or DailyLog(date=state.selected_date)


def entry_count(state: AppState, focus: str) -> int:
    log = _current_log(state)
    return len(log.food_entries if focus == FOOD else log.sokay_entries)


def draw_day(pane, state: AppState, focus: str, selected_idx: int) -> int:
    pane.erase()
    max_h, max_w = pane.getmaxyx()
    pane.border()
    log = _current_log(state)
    title = f" {log.date:%A, %B %d, %Y} "
    safe_addstr(pane, 0, max((max_w - len(title)) // 2, 1), title, curses.A_BOLD)

    selected_idx = max(0, min(selected_idx, entry_count(state, focus) - 1))
    y = 2
    safe_addstr(pane, y, 2, f"Weight: {_fmt(log.weight, 'lbs')}    Waist: {_fmt(log.waist, 'in')}")
    y += 1
    safe_addstr(pane, y, 2,
                f"Miles: {_fmt(log.miles_covered, 'mi')}    Elevation: {_fmt(log.elevation_gain, 'ft')}")
    y += 2

    for section, entries in ((FOOD, [e.name for e in log.food_entries]),
                             (SOKAY, list(log.sokay_entries))):
        header = "Food:" if section == FOOD else (
            f"Sokay (total {calculate_cumulative_sokay(state.daily_logs, log.date)}):")
        attr = curses.A_BOLD | (curses.A_UNDERLINE if focus == section else 0)
        safe_addstr(pane, y, 2, header, attr)
        y += 1
        if not entries:
            safe_addstr(pane, y, 4, "(none)", curses.A_DIM)
            y += 1
        for i, text in enumerate(entries):
            if y >= max_h - 4:
                break
            hl = curses.A_REVERSE if focus == section and i == selected_idx else curses.A_NORMAL
            safe_addstr(pane, y, 4, f"- {text}", hl)
            y += 1
        y += 1

    if log.strength_mobility and y < max_h - 2:
        safe_addstr(pane, y, 2, f"Strength & Mobility: {log.strength_mobility}")
        y += 1
    if log.notes and y < max_h - 2:
        safe_addstr(pane, y, 2, f"Notes: {log.notes}")
    return selected_idx


def _apply(stdscr, service: DailyLogService, action, *args):
    try:
        service.apply(action, *args)
    except ValidationError as e:
        popup_error(stdscr, e)


def edit_field_tui(stdscr, service: DailyLogService, key: int) -> None:
    log = _current_log(service.state)
    fields = {
        ord("w"): ("Weight (lbs):", actions.update_weight, log.weight),
        ord("W"): ("Waist (inches):", actions.update_waist, log.waist),
        ord("m"): ("Miles covered:", actions.update_miles, log.miles_covered),
        ord("v"): ("Elevation gain (ft):", actions.update_elevation, log.elevation_gain),
        ord("S"): ("Strength & Mobility:", actions.update_strength_mobility, log.strength_mobility),
        ord("n"): ("Notes:", actions.update_notes, log.notes),
    }
    prompt, action, current = fields[key]
    default = "" if current is None else (f"{current:g}" if isinstance(current, float) else str(current))
    value = popup_input(stdscr, prompt, default=default)
    if value is None:
        return
    _apply(stdscr, service, action, value)


def add_entry_tui(stdscr, service: DailyLogService, focus: str) -> None:
    if focus == FOOD:
        name = popup_input(stdscr, "Food:")
        if name:
            _apply(stdscr, service, actions.add_food, name)
    else:
        text = popup_input(stdscr, "Sokay:")
        if text:
            _apply(stdscr, service, actions.add_sokay, text)


def edit_entry_tui(stdscr, service: DailyLogService, focus: str, idx: int) -> None:
    log = _current_log(service.state)
    entries = log.food_entries if focus == FOOD else log.sokay_entries
    if not 0 <= idx < len(entries):
        return
    current = entries[idx].name if focus == FOOD else entries[idx]
    value = popup_input(stdscr, "Edit entry:", default=current)
    if not value:
        return
    action = actions.update_food if focus == FOOD else actions.update_sokay
    _apply(stdscr, service, action, idx, value)


def delete_entry_tui(stdscr, service: DailyLogService, focus: str, idx: int) -> None:
    if not 0 <= idx < entry_count(service.state, focus):
        return
    if popup_confirm(stdscr, "Delete selected entry?"):
        action = actions.delete_food if focus == FOOD else actions.delete_sokay
        _apply(stdscr, service, action, idx)


def shift_day(state: AppState, days: int) -> None:
    state.selected_date = state.selected_date + timedelta(days=days)
