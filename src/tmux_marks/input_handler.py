"""Keyboard input handling and dashboard loop."""

from __future__ import annotations

import curses
from collections.abc import Callable
from dataclasses import dataclass

from .config import Config
from .controller import MarksController, SearchHit
from .errors import TmuxMarksError
from .logger import Logger
from .prompts import prompt_input_popup
from .ui import MarksUI, UiState, UiStatus
from .views import RenderedView, render_marks, render_sessions

SESSIONS_VIEW = "sessions"
MARKS_VIEW = "marks"

KEY_TAB = 9
KEY_SPACE = 32
KEY_CTRL_C = 3
ENTER_KEYS = (10, 13, curses.KEY_ENTER)


@dataclass
class Dashboard:
    """Dashboard state driven one key at a time.

    ``prompt`` reads a line of text from the user; the curses loop passes a
    popup, tests pass a plain function.
    """

    controller: MarksController
    logger: Logger
    view_kind: str = SESSIONS_VIEW
    cursor_row: int | None = None
    status: UiStatus | None = None

    def view(self) -> RenderedView:
        if self.view_kind == MARKS_VIEW:
            return render_marks(self.controller.list_marks())
        return render_sessions(self.controller.list_sessions())

    def refresh(self) -> None:
        try:
            self.controller.refresh_sessions()
            self.status = UiStatus("Session list refreshed", level="info")
        except TmuxMarksError as exc:
            self.logger.error("session_list", str(exc))
            self.status = UiStatus(str(exc), level="error")
        self._clamp_cursor()

    def handle_key(self, key: int, prompt: Callable[[str], str | None] | None = None) -> bool:
        """Apply ``key``; returns False when the dashboard should close."""
        if key in (ord("q"), KEY_CTRL_C, 27):
            return False
        if key == KEY_TAB:
            self.view_kind = MARKS_VIEW if self.view_kind == SESSIONS_VIEW else SESSIONS_VIEW
            self.cursor_row = None
            self._clamp_cursor()
            return True
        if key in (curses.KEY_UP, ord("k")):
            self.cursor_row = self.view().step(self.cursor_row, -1)
            return True
        if key in (curses.KEY_DOWN, ord("j")):
            self.cursor_row = self.view().step(self.cursor_row, 1)
            return True
        if self.view_kind == SESSIONS_VIEW:
            return self._handle_sessions_key(key)
        return self._handle_marks_key(key, prompt)

    def _handle_sessions_key(self, key: int) -> bool:
        if key == ord("r"):
            self.refresh()
            return True
        if key == KEY_SPACE:
            session_id = self.view().entity_at(self.cursor_row) if self.cursor_row is not None else None
            if session_id is None:
                self.status = UiStatus("No session on this line", level="warning")
                return True
            selected = self.controller.toggle_selection(session_id)
            session = self.controller.inventory.find_session(session_id)
            name = session.name if session else session_id
            self.status = UiStatus(f"{name}: {'selected' if selected else 'deselected'} for search")
        return True

    def _handle_marks_key(self, key: int, prompt: Callable[[str], str | None] | None) -> bool:
        view = self.view()
        position = view.entity_at(self.cursor_row) if self.cursor_row is not None else None
        if key == ord("d"):
            if position is None:
                self.status = UiStatus("No mark on this line", level="warning")
                return True
            removed = self.controller.delete_mark(position)
            if removed:
                self.status = UiStatus(f"Deleted {removed.display_name}:{removed.line}")
            self._clamp_cursor()
            return True
        if key == ord("a"):
            self._add_mark(prompt)
            return True
        if key in ENTER_KEYS:
            if position is None:
                self.status = UiStatus("No mark on this line", level="warning")
                return True
            try:
                target = self.controller.jump_to_mark(position)
            except TmuxMarksError as exc:
                self.logger.error("jump", str(exc))
                self.status = UiStatus(str(exc), level="error")
                return True
            return target is None
        return True

    def _add_mark(self, prompt: Callable[[str], str | None] | None) -> None:
        if prompt is None:
            return
        text = prompt("Add mark")
        if not text:
            self.status = UiStatus("Add canceled", level="warning")
            return
        hit = SearchHit.parse(text) or SearchHit(path=text)
        try:
            mark = self.controller.add_mark(hit.path, hit.line, must_exist=True)
        except TmuxMarksError as exc:
            self.status = UiStatus(str(exc), level="error")
            return
        self.status = UiStatus(f"📌 Marked: {mark.display_name} at line {mark.line}")
        self._clamp_cursor()

    def _clamp_cursor(self) -> None:
        view = self.view()
        if self.cursor_row in view.rows:
            return
        rows = view.selectable_rows()
        if not rows:
            self.cursor_row = None
            return
        if self.cursor_row is None:
            self.cursor_row = rows[0]
            return
        earlier = [row for row in rows if row <= self.cursor_row]
        self.cursor_row = earlier[-1] if earlier else rows[0]


def run_dashboard(controller: MarksController, config: Config, logger: Logger) -> None:
    def _main(stdscr: curses._CursesWindow) -> None:
        ui = MarksUI(stdscr, config.color)
        ui.init()
        dashboard = Dashboard(controller, logger)
        dashboard.refresh()

        def _prompt(title: str) -> str | None:
            return prompt_input_popup(stdscr, title)

        while True:
            ui.render(UiState(view=dashboard.view(), cursor_row=dashboard.cursor_row, status=dashboard.status))
            key = stdscr.getch()
            if not dashboard.handle_key(key, _prompt):
                return

    curses.wrapper(_main)
