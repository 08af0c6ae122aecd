"""Checks that tmux-marks runs inside a usable tmux session."""

from __future__ import annotations

import os

from libtmux import exc as libtmux_exc
from libtmux.common import get_version

from .errors import EnvironmentUnavailable


def inside_tmux() -> bool:
    return bool(os.environ.get("TMUX"))


def tmux_version() -> str:
    """Return the installed tmux version string.

    Raises:
        EnvironmentUnavailable: tmux is not installed or not runnable.
    """
    try:
        return str(get_version())
    except libtmux_exc.LibTmuxException as exc:
        raise EnvironmentUnavailable(f"tmux unavailable: {exc}") from exc


def check_environment() -> str:
    """Make sure we run inside tmux and return the tmux version."""
    if not inside_tmux():
        raise EnvironmentUnavailable(
            "Not running inside a tmux session. Attach to a tmux session and try again."
        )
    return tmux_version()
