import pytest
from libtmux import exc as libtmux_exc

from tmux_marks import environment
from tmux_marks.errors import EnvironmentUnavailable


def test_outside_tmux_is_unavailable(monkeypatch):
    monkeypatch.delenv("TMUX", raising=False)
    with pytest.raises(EnvironmentUnavailable, match="Not running inside a tmux session"):
        environment.check_environment()


def test_inside_tmux_returns_version(monkeypatch):
    monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,1234,0")
    monkeypatch.setattr(environment, "get_version", lambda: "3.4")
    assert environment.check_environment() == "3.4"


def test_missing_tmux_binary(monkeypatch):
    def fake_version():
        raise libtmux_exc.TmuxCommandNotFound()

    monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,1234,0")
    monkeypatch.setattr(environment, "get_version", fake_version)
    with pytest.raises(EnvironmentUnavailable, match="tmux unavailable"):
        environment.check_environment()
