# mountains/ui.py
# Mountains - A terminal-based training log
# Copyright (C) 2024 Zach McKinnon
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
import curses
import logging
import time
from datetime import date

import mountains.config.config_manager as cf
from mountains.app_state import AppState, DailyLogService
from mountains.ui_views.daily_ui import (
    FOOD,
    SOKAY,
    add_entry_tui,
    delete_entry_tui,
    draw_day,
    edit_entry_tui,
    edit_field_tui,
    entry_count,
    shift_day,
)
from mountains.ui_views.home_ui import delete_day_tui, draw_home, go_to_date_tui
from mountains.ui_views.popups import popup_error, popup_show, show_help_popup
from mountains.ui_views.ui_helpers import create_pane, draw_menu, draw_status

logger = logging.getLogger(__name__)

# getch() timeout, so the status label and the sync timer keep ticking
POLL_MS = 500
# lets the "Syncing…" status render before the terminal is restored
SHUTDOWN_PAUSE = 0.5

MIN_HEIGHT = 10
MIN_WIDTH = 40

FIELD_KEYS = tuple(ord(c) for c in "wWmvSn")


class PeriodicSync:
    """
    Decides when the loop should queue a background sync. Checked only
    between keystrokes, so it never fires while a popup has the keyboard.
    """

    def __init__(self, interval: float, clock=time.monotonic):
        self.interval = interval
        self.clock = clock
        self.last = clock()

    def due(self) -> bool:
        return self.clock() - self.last >= self.interval

    def tick(self, manager) -> bool:
        if not self.due():
            return False
        self.last = self.clock()
        manager.request_sync()
        return True


def show_tui_welcome(stdscr):
    popup_show(stdscr, [
        "Log weight, waist, miles, vert, food and sokay by day.",
        "Everything is saved locally as you type.",
        "Set TURSO_DATABASE_URL and TURSO_AUTH_TOKEN to sync remotely.",
        "",
        "Press ? on any screen for hotkeys.",
    ], title=" Welcome to Mountains ")


def _init_screen(stdscr):
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLUE)    # menu bar
    curses.init_pair(2, curses.COLOR_BLACK, curses.COLOR_CYAN)    # selection
    curses.init_pair(3, curses.COLOR_BLACK, curses.COLOR_WHITE)   # status bar
    curses.curs_set(0)
    stdscr.keypad(True)
    stdscr.timeout(POLL_MS)


def _shutdown(stdscr, manager, h, w):
    draw_status(stdscr, h, w, None, manager.get_sync_status().label,
                message="Syncing…")
    stdscr.refresh()
    manager.shutdown(final_sync=True)
    time.sleep(SHUTDOWN_PAUSE)


def main(stdscr, manager, state: AppState, sync_interval=None):
    service = DailyLogService(state, manager)
    syncer = PeriodicSync(sync_interval or cf.get_sync_interval())

    _init_screen(stdscr)
    config = cf.load_config()
    if not config.get("meta", {}).get("tui_welcome_shown", False):
        show_tui_welcome(stdscr)
        cf.set_config_value("meta", "tui_welcome_shown", True)

    screen = "home"
    home_sel = 0
    day_sel = 0
    focus = FOOD
    menu_h = 1

    while True:
        h, w = stdscr.getmaxyx()
        if h < MIN_HEIGHT or w < MIN_WIDTH:
            stdscr.erase()
            stdscr.addstr(0, 0, f"Terminal too small ({w}x{h}).", curses.A_BOLD)
            stdscr.refresh()
            key = stdscr.getch()
            if key in (ord("q"), 27):
                break
            continue

        stdscr.erase()
        draw_menu(stdscr, "Mountains", f"{date.today():%a %b %d, %Y}", w, color_pair=1)
        stdscr.noutrefresh()
        pane = create_pane(h, w, menu_h, "")
        try:
            if screen == "home":
                home_sel = draw_home(pane, state, home_sel)
            else:
                day_sel = draw_day(pane, state, focus, day_sel)
        except curses.error as e:
            logger.debug("Draw error: %s", e)
        pane.noutrefresh()
        # state is read fresh every frame
        draw_status(stdscr, h, w, screen, manager.get_sync_status().label)
        stdscr.noutrefresh()
        curses.doupdate()

        key = stdscr.getch()
        if key == -1:
            syncer.tick(manager)
            continue

        try:
            if key == ord("q"):
                break
            if key == ord("?"):
                show_help_popup(stdscr, screen)
            elif screen == "home":
                if key in (curses.KEY_DOWN, ord("j")):
                    home_sel += 1
                elif key in (curses.KEY_UP, ord("k")):
                    home_sel = max(home_sel - 1, 0)
                elif key in (10, 13, curses.KEY_ENTER) and state.daily_logs:
                    state.selected_date = state.daily_logs[home_sel].date
                    screen, day_sel = "day", 0
                elif key == ord("t"):
                    state.selected_date = date.today()
                    screen, day_sel = "day", 0
                elif key == ord("g"):
                    if go_to_date_tui(stdscr, state):
                        screen, day_sel = "day", 0
                elif key == ord("D"):
                    delete_day_tui(stdscr, service, home_sel)
            else:
                if key in (27, ord("h")):
                    screen = "home"
                elif key == 9:
                    focus = SOKAY if focus == FOOD else FOOD
                    day_sel = 0
                elif key in (curses.KEY_DOWN, ord("j")):
                    day_sel = min(day_sel + 1, max(entry_count(state, focus) - 1, 0))
                elif key in (curses.KEY_UP, ord("k")):
                    day_sel = max(day_sel - 1, 0)
                elif key in FIELD_KEYS:
                    edit_field_tui(stdscr, service, key)
                elif key == ord("a"):
                    add_entry_tui(stdscr, service, focus)
                elif key == ord("e"):
                    edit_entry_tui(stdscr, service, focus, day_sel)
                elif key == ord("x"):
                    delete_entry_tui(stdscr, service, focus, day_sel)
                elif key == ord("["):
                    shift_day(state, -1)
                    day_sel = 0
                elif key == ord("]"):
                    shift_day(state, 1)
                    day_sel = 0
        except Exception as e:
            logger.error("UI error: %s", e, exc_info=True)
            popup_error(stdscr, e)

        syncer.tick(manager)

    _shutdown(stdscr, manager, h, w)
