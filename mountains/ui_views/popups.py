# ─── Popups & Helpers ─────────────────────────────────────────────────

import curses
import textwrap

HELP_LINES = {
    "home": [
        "Home:",
        "↑/↓ or j/k: Move     Enter: Open day     t: Today",
        "g: Go to date        D: Delete day",
        "",
        "?: Help   q: Quit",
    ],
    "day": [
        "Daily View:",
        "w: Weight   W: Waist   m: Miles   v: Elevation",
        "S: Strength & Mobility   n: Notes",
        "Tab: Switch Food/Sokay list   ↑/↓: Move",
        "a: Add   e: Edit   x: Delete selected entry",
        "[ / ]: Previous / next day   Esc/h: Home",
        "",
        "?: Help   q: Quit",
    ],
}


def show_help_popup(stdscr, screen):
    popup_show(stdscr, HELP_LINES.get(screen, ["q: Quit   ?: Close Help"]),
               title=" Available Hotkeys ")


def popup_show(stdscr, lines, title=""):
    h, w = stdscr.getmaxyx()
    pw = min(max([len(l) for l in lines] + [len(title), 20]) + 4, w - 2)
    ph = min(len(lines) + 4, h - 2)
    y, x = max((h - ph) // 2, 0), max((w - pw) // 2, 0)
    win = curses.newwin(ph, pw, y, x)
    win.border()
    if title:
        win.addstr(0, max((pw - len(title)) // 2, 1), title[:pw - 2], curses.A_BOLD)
    for idx, line in enumerate(lines[:ph - 4]):
        win.addstr(1 + idx, 2, line[:pw - 4])
    win.addstr(ph - 2, 2, "Press any key"[:pw - 4], curses.A_DIM)
    win.refresh()
    win.getch()
    win.clear()
    stdscr.touchwin()
    stdscr.refresh()


def popup_error(stdscr, error, title=" Error! "):
    h, w = stdscr.getmaxyx()
    lines = str(error).splitlines() or [repr(error)]
    win_w = min(60, w - 4)
    wrapped = []
    for line in lines:
        wrapped.extend(textwrap.wrap(line, width=win_w - 4) or [""])
    win_h = min(5 + len(wrapped), h - 2)
    win = curses.newwin(win_h, win_w, max((h - win_h) // 2, 0), max((w - win_w) // 2, 0))
    win.border()
    win.addstr(0, max((win_w - len(title)) // 2, 1), title, curses.A_BOLD)
    for idx, line in enumerate(wrapped[:win_h - 4]):
        win.addstr(1 + idx, 2, line[:win_w - 4])
    prompt = "Press any key to close"
    win.addstr(win_h - 2, max((win_w - len(prompt)) // 2, 1), prompt, curses.A_DIM)
    win.refresh()
    win.getch()
    win.clear()
    stdscr.touchwin()
    stdscr.refresh()


def popup_input(stdscr, prompt, default="", max_length=200):
    """
    Single-line input. Returns the entered text ("" when the user clears
    the field and presses Enter) or None if cancelled with ESC.
    """
    h, w = stdscr.getmaxyx()
    pw = min(max(len(prompt) + 10, 48), w - 4)
    ph = 6
    y, x = max((h - ph) // 2, 0), max((w - pw) // 2, 0)
    win = curses.newwin(ph, pw, y, x)
    win.keypad(True)
    win.border()
    win.addstr(1, 2, prompt[:pw - 4])
    win.addstr(3, 2, "> ")
    curses.curs_set(1)
    inp = list(default or "")
    cancelled = False
    while True:
        visible = "".join(inp)[-(pw - 8):]
        win.move(3, 4)
        win.clrtoeol()
        win.addstr(3, 4, visible)
        win.border()
        win.move(3, 4 + len(visible))
        win.refresh()
        c = win.getch()
        if c in (10, 13, curses.KEY_ENTER):
            break
        if c == 27:
            cancelled = True
            break
        if c in (curses.KEY_BACKSPACE, 127, 8):
            if inp:
                inp.pop()
        elif len(inp) < max_length and 32 <= c <= 126:
            inp.append(chr(c))
    curses.curs_set(0)
    win.clear()
    stdscr.touchwin()
    stdscr.refresh()
    if cancelled:
        return None
    return "".join(inp).strip()


def popup_confirm(stdscr, message) -> bool:
    h, w = stdscr.getmaxyx()
    pw = min(max(len(message) + 12, 36), w - 4)
    ph = 7
    y, x = max((h - ph) // 2, 0), max((w - pw) // 2, 0)
    win = curses.newwin(ph, pw, y, x)
    win.border()
    win.addstr(2, 2, message[:pw - 4], curses.A_BOLD)
    prompt = "[Y] Yes    [n] No (ESC = Cancel)"
    win.addstr(4, max((pw - len(prompt)) // 2, 1), prompt[:pw - 2], curses.A_DIM)
    win.refresh()
    while True:
        c = win.getch()
        if c == ord("Y"):
            result = True
            break
        if c in (ord("n"), ord("N"), 27):
            result = False
            break
    win.clear()
    stdscr.touchwin()
    stdscr.refresh()
    return result
