"""Switch tmux focus to an editor pane and make it open a file.

There is no RPC channel into the editor running in the target pane, so the
jump types an ex-command into it with ``send-keys``. Nothing confirms that
the keystrokes arrived or that the file opened.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import DEFAULT_TMUX_COMMAND
from .errors import CommandFailed, NoEditorInSession, NoMatchingSession, NoSessionsFound, TmuxMarksError
from .logger import Logger
from .models import Session, Window
from .process_runner import shell_quote
from .tmux_manager import CommandRunner, TmuxInventory


def escape_double_quoted(value: str) -> str:
    return value.replace('"', '\\"')


def build_edit_command(path: str, line: int) -> str:
    """Build the ex-command that opens ``path`` at ``line``.

    Double quotes in the path are backslash-escaped for the double-quoted
    argument. Single quotes are left alone here; the shell layer quotes the
    whole command separately (see ``shell_quote``).
    """
    return f':silent! edit +{line} "{escape_double_quoted(path)}"'


@dataclass(frozen=True)
class JumpTarget:
    session_name: str
    window_index: int
    pane_index: int

    @property
    def session_target(self) -> str:
        return self.session_name

    @property
    def window_target(self) -> str:
        return f"{self.session_name}:{self.window_index}"

    @property
    def pane_target(self) -> str:
        return f"{self.session_name}:{self.window_index}.{self.pane_index}"


def select_target(session: Session) -> JumpTarget:
    """Pick the first editor window of ``session``.

    This is not necessarily the window whose directory matched the path.
    """
    window: Window | None = session.first_editor_window()
    if window is None or window.editor_pane_index is None:
        raise NoEditorInSession(f"Session {session.name} is not running vim/nvim.")
    return JumpTarget(session.name, window.index, window.editor_pane_index)


def build_jump_commands(target: JumpTarget, path: str, line: int, tmux: str = DEFAULT_TMUX_COMMAND) -> list[str]:
    pane = shell_quote(target.pane_target)
    return [
        f"{tmux} switch-client -t {shell_quote(target.session_target)}",
        f"{tmux} select-window -t {shell_quote(target.window_target)}",
        f"{tmux} select-pane -t {pane}",
        f"{tmux} send-keys -t {pane} Escape",
        f"{tmux} send-keys -t {pane} -l {shell_quote(build_edit_command(path, line))}",
        f"{tmux} send-keys -t {pane} Enter",
    ]


class JumpOrchestrator:
    def __init__(
        self,
        inventory: TmuxInventory,
        runner: CommandRunner,
        logger: Logger | None = None,
        tmux_command: str = DEFAULT_TMUX_COMMAND,
    ) -> None:
        self._inventory = inventory
        self._runner = runner
        self._logger = logger
        self._tmux = tmux_command

    def jump(self, file_path: str, line: int) -> JumpTarget:
        """Open ``file_path`` at ``line`` in the editor of the owning session.

        Raises:
            ValueError: ``line`` is below 1.
            NoMatchingSession: no window directory is a prefix of the path.
            NoEditorInSession: the owning session runs no editor.
            ProcessSpawnFailed: tmux could not be run.
        """
        if line < 1:
            raise ValueError(f"line must be >= 1, got {line}")

        try:
            self._inventory.refresh()
        except NoSessionsFound as exc:
            self._log("warn", "jump_refresh", str(exc))
            raise NoMatchingSession("No active tmux/nvim session found for this path.") from exc
        except TmuxMarksError as exc:
            # resolve against the previous snapshot
            self._log("warn", "jump_refresh", str(exc))

        session = self._inventory.resolve(file_path)
        if session is None:
            raise NoMatchingSession("No active tmux/nvim session found for this path.")
        if not session.has_editor:
            raise NoEditorInSession(f"Session {session.name} is not running vim/nvim.")

        target = select_target(session)
        for command in build_jump_commands(target, file_path, line, self._tmux):
            try:
                self._runner.run(command)
            except CommandFailed as exc:
                self._log("warn", "jump_command", str(exc), session.name)

        self._log("info", "jump", f"{file_path}:{line} -> {target.pane_target}", session.name)
        return target

    def _log(self, level: str, event: str, message: str, session_name: str | None = None) -> None:
        if self._logger:
            getattr(self._logger, level)(event, message, session_name)
