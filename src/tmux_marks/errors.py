"""Error kinds raised by tmux-marks.

Every error here is recoverable: callers log it, show the message to the
user and keep their previous state.
"""

from __future__ import annotations


class TmuxMarksError(Exception):
    """Base exception for tmux-marks errors."""
    pass


class ProcessSpawnFailed(TmuxMarksError):
    """Raised when an external command could not be launched or timed out."""
    pass


class CommandFailed(TmuxMarksError):
    """Raised when an external command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        program = " ".join(command.split()[:2]) or "command"
        super().__init__(f"{program} failed: {detail}")


class NoSessionsFound(TmuxMarksError):
    """Raised when tmux reports no sessions."""
    pass


class NoMatchingSession(TmuxMarksError):
    """Raised when no session owns the requested path."""
    pass


class NoEditorInSession(TmuxMarksError):
    """Raised when the owning session runs no editor."""
    pass


class InvalidMarkTarget(TmuxMarksError):
    """Raised when a mark is requested on an unnamed or special buffer."""
    pass


class EnvironmentUnavailable(TmuxMarksError):
    """Raised when not running inside a tmux session."""
    pass
