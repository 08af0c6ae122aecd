"""Map a file path to the tmux session that owns it."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Session, Window


def best_window_match(sessions: Iterable[Session], file_path: str) -> tuple[Session, Window] | None:
    """Return the session/window whose working directory is the longest prefix of ``file_path``.

    The comparison is a plain string prefix test starting at position 0.
    When two directories have the same length the first one found wins,
    in session order and then window order.
    """
    best: tuple[Session, Window] | None = None
    best_length = 0
    for session in sessions:
        for window in session.windows:
            directory = window.working_directory
            if not directory or not file_path.startswith(directory):
                continue
            if len(directory) > best_length:
                best_length = len(directory)
                best = (session, window)
    return best


def resolve_session(
    sessions: Iterable[Session],
    file_path: str,
    require_editor: bool = False,
) -> Session | None:
    match = best_window_match(sessions, file_path)
    if match is None:
        return None
    session = match[0]
    if require_editor and not session.has_editor:
        return None
    return session
