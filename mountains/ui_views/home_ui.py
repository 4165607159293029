# mountains/ui_views/home_ui.py
# -------------------------------------------------------------------
# Home view: running totals and the list of logged days
# -------------------------------------------------------------------
import curses
from datetime import date, datetime

from mountains.app_state import AppState
from mountains.ui_views.popups import popup_confirm, popup_error, popup_input
from mountains.ui_views.ui_helpers import safe_addstr
from mountains.utils import stats


def _summary_line(log) -> str:
    parts = [f"{log.date:%a %m/%d/%Y}"]
    if log.miles_covered is not None:
        parts.append(f"{log.miles_covered:g} mi")
    if log.elevation_gain is not None:
        parts.append(f"{log.elevation_gain} ft")
    if log.weight is not None:
        parts.append(f"{log.weight:g} lbs")
    if log.food_entries:
        parts.append(f"{len(log.food_entries)} food")
    if log.sokay_entries:
        parts.append(f"{len(log.sokay_entries)} sokay")
    return "  ".join(parts)


def draw_home(pane, state: AppState, selected_idx: int, today: date = None) -> int:
    pane.erase()
    max_h, max_w = pane.getmaxyx()
    pane.border()
    title = " Mountains "
    safe_addstr(pane, 0, max((max_w - len(title)) // 2, 1), title, curses.A_BOLD)

    logs = state.daily_logs
    today = today or date.today()
    y = 2
    safe_addstr(pane, y, 2,
                f"Year: {stats.calculate_yearly_miles(logs, today):g} mi, "
                f"{stats.calculate_yearly_elevation(logs, today)} ft   "
                f"Month: {stats.calculate_monthly_miles(logs, today):g} mi, "
                f"{stats.count_monthly_1000_days(logs, today)} days of 1000+ ft")
    y += 1
    safe_addstr(pane, y, 2, stats.get_streak_message(logs), curses.A_DIM)
    y += 2

    if not logs:
        safe_addstr(pane, y, 2, "No days logged yet. Press t to start today.")
        return 0

    selected_idx = max(0, min(selected_idx, len(logs) - 1))
    rows = max_h - y - 1
    start = max(0, selected_idx - rows + 1)
    for i, log in enumerate(logs[start:start + rows], start=start):
        attr = curses.A_REVERSE if i == selected_idx else curses.A_NORMAL
        safe_addstr(pane, y, 2, _summary_line(log)[: max_w - 4], attr)
        y += 1
    return selected_idx


def go_to_date_tui(stdscr, state: AppState) -> bool:
    raw = popup_input(stdscr, "Date (YYYY-MM-DD, blank for today):")
    if raw is None:
        return False
    if not raw:
        state.selected_date = date.today()
        return True
    try:
        state.selected_date = datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        popup_error(stdscr, f"Invalid date: {raw!r}")
        return False
    return True


def delete_day_tui(stdscr, service, selected_idx: int) -> None:
    logs = service.state.daily_logs
    if not 0 <= selected_idx < len(logs):
        return
    day = logs[selected_idx].date
    if popup_confirm(stdscr, f"Delete everything logged on {day:%m/%d/%Y}?"):
        service.delete_day(day)
