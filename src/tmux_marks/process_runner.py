"""Shell command execution, the only I/O boundary of the engine."""

from __future__ import annotations

import subprocess

from .errors import CommandFailed, ProcessSpawnFailed
from .logger import Logger

DEFAULT_TIMEOUT = 5.0


def shell_quote(value: object) -> str:
    """Wrap ``value`` in single quotes for a POSIX shell.

    An embedded single quote closes the string, is emitted escaped, and the
    string is reopened: ``a'b`` becomes ``'a'\\''b'``.
    """
    text = str(value)
    return "'" + text.replace("'", "'\\''") + "'"


class ProcessRunner:
    """Run one shell command per call and return its stdout.

    No retries: every command is attempted exactly once.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, logger: Logger | None = None) -> None:
        self.timeout = timeout
        self._logger = logger

    def run(self, command: str) -> str:
        if self._logger:
            self._logger.debug("run", command)
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProcessSpawnFailed(f"command timed out after {self.timeout}s: {command}") from exc
        except OSError as exc:
            raise ProcessSpawnFailed(f"could not run {command}: {exc}") from exc

        # the shell reports a missing binary as exit status 127
        if result.returncode == 127:
            raise ProcessSpawnFailed(result.stderr.strip() or f"command not found: {command}")
        if result.returncode != 0:
            raise CommandFailed(command, result.returncode, result.stderr)
        return result.stdout
