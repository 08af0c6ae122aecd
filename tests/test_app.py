import json

import pytest

from conftest import FakeTmux, session, window
from tmux_marks import app
from tmux_marks.controller import MarksController
from tmux_marks.errors import EnvironmentUnavailable


@pytest.fixture
def tmux(monkeypatch, tmp_path):
    fake = FakeTmux([
        session("$1", "dev", [window(0, "/home/user/dev", panes=[(0, "nvim")])], attached=1),
        session("$2", "ops", [window(0, "/srv", panes=[(0, "zsh")])]),
    ])
    monkeypatch.setenv("TMUX_MARKS_CONFIG", str(tmp_path / "config.json"))
    monkeypatch.setenv("TMUX_MARKS_LOG", str(tmp_path / "log.jsonl"))
    monkeypatch.setattr(app, "check_environment", lambda: "3.4")
    monkeypatch.setattr(
        app.MarksController,
        "from_config",
        classmethod(lambda cls, config, logger: MarksController(fake, logger)),
    )
    return fake


def test_sessions_json(tmux, capsys):
    assert app.main(["sessions", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert [s["name"] for s in data] == ["dev", "ops"]
    assert data[0]["has_editor"] is True
    assert data[1]["windows"][0]["working_directory"] == "/srv"


def test_sessions_plain(tmux, capsys):
    assert app.main(["sessions"]) == 0
    out = capsys.readouterr().out
    assert "Name: dev" in out
    assert "Editor: no" in out


def test_roots(tmux, capsys):
    assert app.main(["roots"]) == 0
    assert capsys.readouterr().out.splitlines() == ["/home/user/dev", "/srv"]


def test_resolve(tmux, capsys):
    assert app.main(["resolve", "/home/user/dev/src/app.py"]) == 0
    assert capsys.readouterr().out.strip() == "dev"


def test_resolve_without_owner(tmux, capsys):
    assert app.main(["resolve", "/etc/hosts"]) == 1
    assert "No tmux session found" in capsys.readouterr().err


def test_jump_with_line(tmux, capsys):
    assert app.main(["jump", "/home/user/dev/app.py", "12"]) == 0
    assert capsys.readouterr().out.strip() == "Jumped to dev:0.0"
    assert tmux.control_commands()[-2] == "tmux send-keys -t 'dev:0.0' -l ':silent! edit +12 \"/home/user/dev/app.py\"'"


def test_jump_with_search_hit(tmux, capsys):
    assert app.main(["jump", "/home/user/dev/app.py:30:4:def main"]) == 0
    assert "+30 " in tmux.control_commands()[-2]


def test_jump_error_returns_one(tmux, capsys, tmp_path):
    assert app.main(["jump", "/srv/deploy.sh", "3"]) == 1
    assert "not running vim/nvim" in capsys.readouterr().err

    records = [json.loads(line) for line in (tmp_path / "log.jsonl").read_text(encoding="utf-8").splitlines()]
    assert records[-1]["level"] == "ERROR"
    assert records[-1]["event"] == "jump"


def test_explicit_line_zero_is_rejected(tmux, capsys):
    assert app.main(["jump", "/home/user/dev/app.py", "0"]) == 1

    captured = capsys.readouterr()
    assert captured.err.startswith("Error:")
    assert captured.out == ""
    assert tmux.control_commands() == []


def test_environment_failure(monkeypatch, tmp_path, capsys):
    def unavailable():
        raise EnvironmentUnavailable("Not running inside a tmux session.")

    monkeypatch.setenv("TMUX_MARKS_CONFIG", str(tmp_path / "config.json"))
    monkeypatch.setenv("TMUX_MARKS_LOG", str(tmp_path / "log.jsonl"))
    monkeypatch.setattr(app, "check_environment", unavailable)

    assert app.main(["roots"]) == 1
    assert "Not running inside a tmux session" in capsys.readouterr().err
