"""tmux session inventory: sessions, windows, panes and editor detection."""

from __future__ import annotations

import re
from typing import Protocol

from .config import DEFAULT_EDITOR_PATTERN, DEFAULT_TMUX_COMMAND
from .errors import CommandFailed, NoSessionsFound, ProcessSpawnFailed
from .logger import Logger
from .models import PaneInfo, Session, Window
from .process_runner import shell_quote
from .resolver import resolve_session

# Chosen so that it never shows up in session names, window names or paths.
FIELD_DELIMITER = "||__||"

SESSION_FORMAT = FIELD_DELIMITER.join(
    ["#{session_id}", "#{session_name}", "#{session_windows}", "#{session_attached}"]
)
WINDOW_FORMAT = FIELD_DELIMITER.join(["#{window_index}", "#{window_name}", "#{pane_current_path}"])
PANE_FORMAT = FIELD_DELIMITER.join(["#{pane_index}", "#{pane_current_command}"])

_NO_SERVER_MARKERS = ("no server running", "error connecting to", "no sessions")


class CommandRunner(Protocol):
    def run(self, command: str) -> str: ...


def _split_record(line: str, fields: int) -> list[str]:
    parts = line.split(FIELD_DELIMITER, fields - 1)
    return (parts + [""] * fields)[:fields]


def _parse_int(value: str) -> int | None:
    value = value.strip()
    return int(value) if value.isdigit() else None


def _normalize_attached(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    try:
        return int(str(value)) > 0
    except ValueError:
        return str(value).strip().lower() in {"true", "yes", "y"}


def parse_session_records(output: str) -> list[tuple[str, str, int, bool]]:
    """Parse ``list-sessions`` output into (id, name, window_count, attached)."""
    records: list[tuple[str, str, int, bool]] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        session_id, name, windows, attached = _split_record(line, 4)
        if not session_id:
            continue
        records.append((session_id, name, _parse_int(windows) or 0, _normalize_attached(attached)))
    return records


def parse_window_record(output: str, index: int) -> Window | None:
    """Pick the record for window ``index`` out of ``list-windows`` output."""
    for line in output.splitlines():
        window_index, name, path = _split_record(line, 3)
        if _parse_int(window_index) != index:
            continue
        return Window(index=index, name=name, working_directory=path.rstrip("\r\n"))
    return None


def parse_pane_records(output: str) -> list[PaneInfo]:
    panes: list[PaneInfo] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        pane_index, command = _split_record(line, 2)
        index = _parse_int(pane_index)
        if index is None:
            continue
        panes.append(PaneInfo(index=index, current_command=command.strip()))
    return panes


def find_editor_pane(panes: list[PaneInfo], pattern: re.Pattern[str]) -> int | None:
    """Return the index of the first pane running an editor, if any."""
    for pane in panes:
        if pattern.search(pane.current_command):
            return pane.index
    return None


class TmuxInventory:
    """Snapshot of tmux sessions with editor detection and selection state.

    ``refresh`` rebuilds the whole tree with one query per session list,
    window and pane list. The retained snapshot is only replaced once every
    session has been built, so readers never observe a half-built list.
    """

    def __init__(
        self,
        runner: CommandRunner,
        logger: Logger | None = None,
        editor_pattern: str | re.Pattern[str] = DEFAULT_EDITOR_PATTERN,
        tmux_command: str = DEFAULT_TMUX_COMMAND,
    ) -> None:
        self._runner = runner
        self._logger = logger
        self._editor_pattern = re.compile(editor_pattern) if isinstance(editor_pattern, str) else editor_pattern
        self._tmux = tmux_command
        self._sessions: list[Session] = []

    def sessions(self) -> list[Session]:
        return list(self._sessions)

    def find_session(self, session_id: str) -> Session | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def refresh(self) -> None:
        """Rebuild the snapshot from tmux.

        Raises:
            ProcessSpawnFailed: tmux could not be run.
            CommandFailed: ``list-sessions`` exited with an error.
            NoSessionsFound: tmux has no sessions (or no server).

        On any of these the previous snapshot is left untouched.
        """
        records = self._list_session_records()
        previous = {session.id: session.selected for session in self._sessions}

        new_sessions: list[Session] = []
        seen: set[str] = set()
        for session_id, name, window_count, attached in records:
            if session_id in seen:
                self._warn("refresh", f"duplicate session id {session_id} ignored", name)
                continue
            seen.add(session_id)
            session = Session(
                id=session_id,
                name=name,
                attached=attached,
                selected=previous.get(session_id, True),
            )
            for index in range(window_count):
                window = self._load_window(name, index)
                if window is not None:
                    session.windows.append(window)
            new_sessions.append(session)

        self._sessions = new_sessions
        if self._logger:
            self._logger.debug("refresh", f"{len(new_sessions)} sessions loaded")

    def toggle_selection(self, session_id: str) -> bool:
        session = self.find_session(session_id)
        if session is None:
            self._warn("toggle", f"unknown session id {session_id}")
            return False
        session.selected = not session.selected
        return session.selected

    def selected_sessions(self) -> list[Session]:
        return [session for session in self._sessions if session.selected]

    def search_roots(self) -> list[str]:
        roots: list[str] = []
        for session in self.selected_sessions():
            for window in session.windows:
                path = window.working_directory
                if path and path not in roots:
                    roots.append(path)
        return roots

    def resolve(self, file_path: str, require_editor: bool = False) -> Session | None:
        return resolve_session(self._sessions, file_path, require_editor=require_editor)

    def _list_session_records(self) -> list[tuple[str, str, int, bool]]:
        command = f"{self._tmux} list-sessions -F {shell_quote(SESSION_FORMAT)}"
        try:
            output = self._runner.run(command)
        except CommandFailed as exc:
            if any(marker in exc.stderr.lower() for marker in _NO_SERVER_MARKERS):
                raise NoSessionsFound("No tmux sessions found.") from exc
            raise
        records = parse_session_records(output)
        if not records:
            raise NoSessionsFound("No tmux sessions found.")
        return records

    def _load_window(self, session_name: str, index: int) -> Window | None:
        command = f"{self._tmux} list-windows -t {shell_quote(session_name)} -F {shell_quote(WINDOW_FORMAT)}"
        try:
            output = self._runner.run(command)
        except (CommandFailed, ProcessSpawnFailed) as exc:
            self._warn("list_windows", str(exc), session_name)
            return None

        window = parse_window_record(output, index)
        if window is None:
            self._warn("list_windows", f"no window with index {index}", session_name)
            return None

        window.editor_pane_index = self._detect_editor_pane(session_name, index)
        return window

    def _detect_editor_pane(self, session_name: str, window_index: int) -> int | None:
        target = shell_quote(f"{session_name}:{window_index}")
        command = f"{self._tmux} list-panes -t {target} -F {shell_quote(PANE_FORMAT)}"
        try:
            output = self._runner.run(command)
        except (CommandFailed, ProcessSpawnFailed) as exc:
            self._warn("list_panes", str(exc), session_name)
            return None
        return find_editor_pane(parse_pane_records(output), self._editor_pattern)

    def _warn(self, event: str, message: str, session_name: str | None = None) -> None:
        if self._logger:
            self._logger.warn(event, message, session_name)
