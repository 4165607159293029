# mountains/ui_views/ui_helpers.py
import curses
import logging

logger = logging.getLogger(__name__)


def safe_addstr(win, y, x, text, attr=0):
    """addstr that clips to the window and never raises on the last cell."""
    max_h, max_w = win.getmaxyx()
    if y < 0 or y >= max_h or x < 0 or x >= max_w:
        return
    text = str(text)[: max(max_w - x - 1, 0)]
    if not text:
        return
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        pass


# ─── Single, contextual status‐bar ───────────────────────────────────


def draw_status(stdscr, h, w, screen, sync_label, message=None):
    status_y = h - 1
    stdscr.attron(curses.color_pair(3))
    stdscr.hline(status_y, 0, " ", w)
    if message:
        hint = message
    elif screen == "home":
        hint = "↑/↓:Move  Enter:Open  t:Today  g:Go to  D:Delete  ?:Help  q:Quit"
    elif screen == "day":
        hint = "w/W/m/v:Edit  a/e/x:Entries  Tab:List  [/]:Day  ?:Help  q:Quit"
    else:
        hint = "?:Help  q:Quit"
    label = f" {sync_label} "
    safe_addstr(stdscr, status_y, 1, hint[: max(w - len(label) - 3, 0)])
    safe_addstr(stdscr, status_y, max(w - len(label) - 1, 0), label, curses.A_BOLD)
    stdscr.attroff(curses.color_pair(3))


def draw_menu(stdscr, title, subtitle, w, color_pair=0):
    stdscr.attron(curses.color_pair(color_pair))
    stdscr.hline(0, 0, " ", w)
    safe_addstr(stdscr, 0, 2, title, curses.A_BOLD | curses.color_pair(color_pair))
    if subtitle:
        safe_addstr(stdscr, 0, max(w - len(subtitle) - 2, len(title) + 4), subtitle,
                    curses.color_pair(color_pair))
    stdscr.attroff(curses.color_pair(color_pair))


def create_pane(h, w, menu_h, title):
    """Make a bordered pane under the menu, above the status line."""
    body_h = max(h - menu_h - 1, 3)
    win = curses.newwin(body_h, w, menu_h, 0)
    win.border()
    safe_addstr(win, 0, max((w - len(title)) // 2, 1), title, curses.A_BOLD)
    return win
