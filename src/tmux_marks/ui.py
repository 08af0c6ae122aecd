"""Curses drawing for the sessions and marks views."""

from __future__ import annotations

import curses
from dataclasses import dataclass

from .prompts import safe_addstr, set_cursor_visibility
from .views import RenderedView

PAD_Y = 2
PAD_X = 4

# role -> (pair number, foreground, background)
_PALETTE = {
    "title": (1, curses.COLOR_CYAN, -1),
    "cursor": (2, curses.COLOR_BLACK, curses.COLOR_CYAN),
    "warning": (3, curses.COLOR_YELLOW, -1),
    "error": (4, curses.COLOR_RED, -1),
    "info": (5, curses.COLOR_WHITE, curses.COLOR_BLUE),
}


@dataclass
class UiStatus:
    message: str
    level: str = "info"


@dataclass
class UiState:
    view: RenderedView
    cursor_row: int | None
    status: UiStatus | None


class MarksUI:
    def __init__(self, stdscr: curses._CursesWindow, color_mode: str) -> None:
        self.stdscr = stdscr
        self.color_mode = color_mode
        self.use_color = False

    def init(self) -> None:
        curses.noecho()
        curses.cbreak()
        self.stdscr.keypad(True)
        set_cursor_visibility(0)
        if self.color_mode == "never" or not curses.has_colors():
            return
        try:
            curses.start_color()
            curses.use_default_colors()
            for pair, fg, bg in _PALETTE.values():
                curses.init_pair(pair, fg, bg)
        except curses.error:
            return
        self.use_color = True

    def style(self, role: str) -> int:
        if self.use_color and role in _PALETTE:
            return curses.color_pair(_PALETTE[role][0])
        return curses.A_REVERSE if role == "cursor" else 0

    def render(self, state: UiState) -> None:
        screen = self.stdscr
        screen.erase()
        rows, cols = screen.getmaxyx()
        usable = max(1, cols - 2 * PAD_X)
        visible = max(1, rows - PAD_Y - 2)

        safe_addstr(screen, PAD_Y - 1, PAD_X, state.view.title.strip()[:usable], self.style("title"))

        # scroll just enough to keep the cursor on screen
        first = 0
        if state.cursor_row is not None:
            first = max(0, state.cursor_row - visible + 1)
        for row in range(first, min(len(state.view.lines), first + visible)):
            role = "cursor" if row == state.cursor_row else ""
            safe_addstr(screen, PAD_Y + row - first, PAD_X, state.view.lines[row][: usable - 1], self.style(role))

        if state.status:
            role = state.status.level if state.status.level in ("warning", "error") else "info"
            safe_addstr(screen, rows - 1, PAD_X, state.status.message, self.style(role))
        screen.refresh()
