# tests/test_ui.py

import curses
from datetime import date

import pytest

from mountains.app_state import AppState, DailyLogService
from mountains.ui import PeriodicSync
from mountains.ui_views import daily_ui, home_ui, popups, ui_helpers
from mountains.utils.db.models import DailyLog, FoodEntry

DAY = date(2024, 6, 1)


class FakeWindow:
    """
    Records what gets drawn. getch() replays a scripted key sequence and
    then returns -1.
    """

    def __init__(self, h=24, w=80, keys=()):
        self._h, self._w = h, w
        self.keys = list(keys)
        self.calls = []

    def getmaxyx(self):
        return (self._h, self._w)

    def addstr(self, y, x, s, attr=0):
        if x + len(s) > self._w:
            raise curses.error("addstr past edge")
        self.calls.append(("addstr", y, x, s, attr))

    def text(self):
        return "\n".join(c[3] for c in self.calls if c[0] == "addstr")

    def getch(self):
        return self.keys.pop(0) if self.keys else -1

    def __getattr__(self, name):
        # border, refresh, erase, hline, attron, ... are no-ops
        return lambda *a, **k: None


@pytest.fixture(autouse=True)
def fake_curses(monkeypatch):
    windows = []

    def newwin(h, w, y, x):
        win = FakeWindow(h, w, keys=windows.pop(0) if windows else ())
        return win

    monkeypatch.setattr(curses, "newwin", newwin)
    monkeypatch.setattr(curses, "curs_set", lambda *_: None)
    monkeypatch.setattr(curses, "color_pair", lambda n: n)
    yield windows


def _keys(text):
    return [ord(c) for c in text]


# ─── ui_helpers ──────────────────────────────────────────────────────────────


def test_safe_addstr_clips_to_width():
    win = FakeWindow(h=3, w=10)
    ui_helpers.safe_addstr(win, 1, 2, "a long line of text")
    assert win.calls == [("addstr", 1, 2, "a long ", 0)]


def test_safe_addstr_ignores_out_of_bounds():
    win = FakeWindow(h=3, w=10)
    ui_helpers.safe_addstr(win, 5, 0, "nope")
    ui_helpers.safe_addstr(win, 0, 20, "nope")
    assert win.calls == []


def test_status_bar_shows_sync_label():
    stdscr = FakeWindow(h=24, w=100)
    ui_helpers.draw_status(stdscr, 24, 100, "home", "⚠ Sync Error")
    assert "⚠ Sync Error" in stdscr.text()


def test_status_bar_message_replaces_hints():
    stdscr = FakeWindow(h=24, w=100)
    ui_helpers.draw_status(stdscr, 24, 100, "home", "✓ Synced", message="Syncing…")
    assert "Syncing…" in stdscr.text()
    assert "Enter:Open" not in stdscr.text()


# ─── popups ──────────────────────────────────────────────────────────────────


def test_popup_input_returns_typed_text(fake_curses):
    fake_curses.append(_keys("eggs") + [10])
    assert popups.popup_input(FakeWindow(), "Food:") == "eggs"


def test_popup_input_backspace_and_default(fake_curses):
    fake_curses.append([127, 127] + _keys("9") + [10])
    assert popups.popup_input(FakeWindow(), "Weight:", default="180") == "19"


def test_popup_input_escape_cancels(fake_curses):
    fake_curses.append(_keys("abc") + [27])
    assert popups.popup_input(FakeWindow(), "Food:") is None


def test_popup_input_cleared_field_is_empty_string(fake_curses):
    fake_curses.append([127, 127, 10])
    assert popups.popup_input(FakeWindow(), "Notes:", default="hi") == ""


def test_popup_confirm(fake_curses):
    fake_curses.append(_keys("xY"))
    assert popups.popup_confirm(FakeWindow(), "Delete?") is True
    fake_curses.append([27])
    assert popups.popup_confirm(FakeWindow(), "Delete?") is False


# ─── views ───────────────────────────────────────────────────────────────────


def test_draw_home_lists_days_and_clamps_selection():
    state = AppState([DailyLog(date=DAY, miles_covered=4.0),
                      DailyLog(date=date(2024, 6, 2), elevation_gain=1100)])
    pane = FakeWindow()
    sel = home_ui.draw_home(pane, state, 10, today=date(2024, 6, 3))
    assert sel == 1
    text = pane.text()
    assert "06/02/2024" in text and "1100 ft" in text
    assert "4 mi" in text


def test_draw_home_empty():
    pane = FakeWindow()
    assert home_ui.draw_home(pane, AppState(), 3) == 0
    assert "No days logged yet" in pane.text()


def test_draw_day_does_not_create_the_day():
    state = AppState(selected_date=DAY)
    pane = FakeWindow()
    daily_ui.draw_day(pane, state, daily_ui.FOOD, 0)
    assert state.get_daily_log(DAY) is None
    assert "(none)" in pane.text()


def test_draw_day_shows_entries_and_sokay_total():
    state = AppState([
        DailyLog(date=DAY, food_entries=[FoodEntry("rice")], sokay_entries=["a"]),
        DailyLog(date=date(2024, 5, 31), sokay_entries=["b", "c"]),
    ], selected_date=DAY)
    pane = FakeWindow()
    daily_ui.draw_day(pane, state, daily_ui.SOKAY, 0)
    text = pane.text()
    assert "- rice" in text
    assert "Sokay (total 3):" in text


class RecordingManager:
    def __init__(self):
        self.saved = []
        self.syncs = 0

    def save(self, log):
        self.saved.append(log.copy())

    def request_sync(self):
        self.syncs += 1


def test_edit_field_popup_saves(fake_curses):
    state = AppState(selected_date=DAY)
    mgr = RecordingManager()
    fake_curses.append(_keys("6.5") + [10])
    daily_ui.edit_field_tui(FakeWindow(), DailyLogService(state, mgr), ord("m"))
    assert mgr.saved[-1].miles_covered == 6.5


def test_invalid_field_input_shows_error_and_saves_nothing(fake_curses):
    state = AppState(selected_date=DAY)
    mgr = RecordingManager()
    fake_curses.append(_keys("lots") + [10])
    fake_curses.append([32])  # dismiss the error popup
    daily_ui.edit_field_tui(FakeWindow(), DailyLogService(state, mgr), ord("v"))
    assert mgr.saved == []


def test_add_and_delete_entry(fake_curses):
    state = AppState(selected_date=DAY)
    mgr = RecordingManager()
    service = DailyLogService(state, mgr)
    fake_curses.append(_keys("walked") + [10])
    daily_ui.add_entry_tui(FakeWindow(), service, daily_ui.SOKAY)
    assert mgr.saved[-1].sokay_entries == ["walked"]

    fake_curses.append(_keys("Y"))
    daily_ui.delete_entry_tui(FakeWindow(), service, daily_ui.SOKAY, 0)
    assert mgr.saved[-1].sokay_entries == []


# ─── periodic sync ───────────────────────────────────────────────────────────


def test_periodic_sync_fires_once_per_interval():
    now = [0.0]
    mgr = RecordingManager()
    syncer = PeriodicSync(240, clock=lambda: now[0])

    assert syncer.tick(mgr) is False
    now[0] = 239.9
    assert syncer.tick(mgr) is False
    now[0] = 240.0
    assert syncer.tick(mgr) is True
    assert syncer.tick(mgr) is False
    now[0] = 480.0
    assert syncer.tick(mgr) is True
    assert mgr.syncs == 2
