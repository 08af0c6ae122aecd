import shlex

import pytest

from tmux_marks.errors import CommandFailed
from tmux_marks.tmux_manager import FIELD_DELIMITER


class FakeTmux:
    """Answers tmux query commands from an in-memory layout and records every call.

    ``layout`` is a list of session dicts:
    ``{"id", "name", "attached", "windows": [{"index", "name", "path", "panes": [(index, command)]}]}``.
    """

    def __init__(self, layout=None):
        self.layout = layout or []
        self.commands = []
        self.failures = {}

    def fail(self, fragment, exc):
        self.failures[fragment] = exc

    def run(self, command):
        self.commands.append(command)
        for fragment, exc in self.failures.items():
            if fragment in command:
                raise exc
        argv = shlex.split(command)
        subcommand = argv[1]
        target = argv[argv.index("-t") + 1] if "-t" in argv else None
        if subcommand == "list-sessions":
            if not self.layout:
                raise CommandFailed(command, 1, "no server running on /tmp/tmux-1000/default")
            return "".join(
                FIELD_DELIMITER.join(
                    [s["id"], s["name"], str(len(s["windows"])), str(s.get("attached", 0))]
                )
                + "\n"
                for s in self.layout
            )
        if subcommand == "list-windows":
            session = self._session(target)
            return "".join(
                FIELD_DELIMITER.join([str(w["index"]), w["name"], w["path"]]) + "\n"
                for w in session["windows"]
            )
        if subcommand == "list-panes":
            name, index = target.rsplit(":", 1)
            for window in self._session(name)["windows"]:
                if str(window["index"]) == index:
                    return "".join(
                        FIELD_DELIMITER.join([str(pane), cmd]) + "\n" for pane, cmd in window["panes"]
                    )
            raise CommandFailed(command, 1, f"can't find window: {index}")
        return ""

    def _session(self, name):
        for session in self.layout:
            if session["name"] == name:
                return session
        raise CommandFailed("tmux", 1, f"can't find session: {name}")

    def control_commands(self):
        return [c for c in self.commands if " list-" not in c]


def window(index, path, panes=(), name="zsh"):
    return {"index": index, "name": name, "path": path, "panes": list(panes)}


def session(session_id, name, windows, attached=0):
    return {"id": session_id, "name": name, "attached": attached, "windows": list(windows)}


@pytest.fixture
def fake_tmux():
    return FakeTmux()


class NullLogger:
    def __init__(self):
        self.records = []

    def debug(self, *args, **_kwargs):
        self.records.append(("debug", *args))

    def info(self, *args, **_kwargs):
        self.records.append(("info", *args))

    def warn(self, *args, **_kwargs):
        self.records.append(("warn", *args))

    def error(self, *args, **_kwargs):
        self.records.append(("error", *args))


@pytest.fixture
def null_logger():
    return NullLogger()
