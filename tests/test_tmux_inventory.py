import re

import pytest

from conftest import FakeTmux, session, window
from tmux_marks.errors import CommandFailed, NoSessionsFound, ProcessSpawnFailed
from tmux_marks.models import PaneInfo
from tmux_marks.tmux_manager import (
    TmuxInventory,
    find_editor_pane,
    parse_pane_records,
    parse_session_records,
    parse_window_record,
)


def _dev_layout():
    return [
        session(
            "$1",
            "dev",
            [window(0, "/home/user/proj", panes=[(0, "nvim")], name="editor")],
            attached=1,
        )
    ]


def test_parse_session_records():
    output = "$1||__||dev||__||2||__||1\n\n$2||__||notes||__||1||__||0\n"
    assert parse_session_records(output) == [("$1", "dev", 2, True), ("$2", "notes", 1, False)]


def test_parse_window_record_picks_requested_index_and_strips_newline():
    output = "0||__||zsh||__||/srv/a\n1||__||vim||__||/srv/b\n"
    window_info = parse_window_record(output, 1)
    assert window_info.index == 1
    assert window_info.name == "vim"
    assert window_info.working_directory == "/srv/b"
    assert parse_window_record(output, 10) is None
    assert parse_window_record("10||__||x||__||/srv/c\n", 1) is None


def test_parse_pane_records_skips_garbage():
    panes = parse_pane_records("0||__||zsh\nbogus\n1||__||nvim\n")
    assert panes == [PaneInfo(0, "zsh"), PaneInfo(1, "nvim")]


def test_find_editor_pane_stops_at_first_match():
    pattern = re.compile(r"n?vim")
    panes = [PaneInfo(0, "zsh"), PaneInfo(2, "vim"), PaneInfo(3, "nvim")]
    assert find_editor_pane(panes, pattern) == 2
    assert find_editor_pane([PaneInfo(0, "bash")], pattern) is None


def test_find_editor_pane_loose_pattern_matches_gvim():
    assert find_editor_pane([PaneInfo(4, "gvim")], re.compile(r"n?vim")) == 4


def test_dev_scenario_detects_editor():
    inventory = TmuxInventory(FakeTmux(_dev_layout()))
    inventory.refresh()

    [dev] = inventory.sessions()
    assert dev.id == "$1"
    assert dev.name == "dev"
    assert dev.attached is True
    assert dev.selected is True
    assert dev.has_editor
    [editor_window] = dev.windows
    assert editor_window.index == 0
    assert editor_window.working_directory == "/home/user/proj"
    assert editor_window.has_editor
    assert editor_window.editor_pane_index == 0
    assert inventory.resolve("/home/user/proj/src/main.go") is dev


def test_window_without_editor():
    layout = [session("$1", "ops", [window(0, "/srv", panes=[(0, "zsh"), (1, "htop")])])]
    inventory = TmuxInventory(FakeTmux(layout))
    inventory.refresh()

    [ops] = inventory.sessions()
    assert not ops.has_editor
    assert ops.windows[0].editor_pane_index is None


def test_queries_are_issued_per_window_and_per_pane():
    layout = [
        session(
            "$1",
            "dev",
            [window(0, "/a", panes=[(0, "zsh")]), window(1, "/b", panes=[(0, "vim")])],
        )
    ]
    tmux = FakeTmux(layout)
    TmuxInventory(tmux).refresh()

    assert tmux.commands[0].startswith("tmux list-sessions -F '#{session_id}||__||#{session_name}")
    assert tmux.commands[1:] == [
        "tmux list-windows -t 'dev' -F '#{window_index}||__||#{window_name}||__||#{pane_current_path}'",
        "tmux list-panes -t 'dev:0' -F '#{pane_index}||__||#{pane_current_command}'",
        "tmux list-windows -t 'dev' -F '#{window_index}||__||#{window_name}||__||#{pane_current_path}'",
        "tmux list-panes -t 'dev:1' -F '#{pane_index}||__||#{pane_current_command}'",
    ]


def test_selection_survives_refresh_and_rename():
    layout = [session("$1", "dev", [window(0, "/a")]), session("$2", "ops", [window(0, "/b")])]
    tmux = FakeTmux(layout)
    inventory = TmuxInventory(tmux)
    inventory.refresh()

    assert inventory.toggle_selection("$2") is False
    layout[1]["name"] = "operations"
    inventory.refresh()

    selected = {s.id: s.selected for s in inventory.sessions()}
    assert selected == {"$1": True, "$2": False}
    assert inventory.find_session("$2").name == "operations"


def test_new_session_defaults_to_selected():
    layout = [session("$1", "dev", [window(0, "/a")])]
    tmux = FakeTmux(layout)
    inventory = TmuxInventory(tmux)
    inventory.refresh()
    inventory.toggle_selection("$1")

    layout.append(session("$7", "fresh", [window(0, "/c")]))
    inventory.refresh()

    assert [s.selected for s in inventory.sessions()] == [False, True]


def test_toggle_unknown_session_is_noop(null_logger):
    inventory = TmuxInventory(FakeTmux(_dev_layout()), null_logger)
    inventory.refresh()
    assert inventory.toggle_selection("$99") is False
    assert inventory.sessions()[0].selected is True
    assert null_logger.records[-1][0] == "warn"


def test_refresh_is_idempotent():
    tmux = FakeTmux(_dev_layout())
    inventory = TmuxInventory(tmux)
    inventory.refresh()
    first = inventory.sessions()
    inventory.refresh()
    second = inventory.sessions()

    assert first == second
    assert first[0] is not second[0]


def test_session_ids_are_unique():
    layout = _dev_layout() + _dev_layout()
    inventory = TmuxInventory(FakeTmux(layout))
    inventory.refresh()

    ids = [s.id for s in inventory.sessions()]
    assert ids == ["$1"]


def test_no_server_raises_and_keeps_previous_snapshot():
    tmux = FakeTmux(_dev_layout())
    inventory = TmuxInventory(tmux)
    inventory.refresh()
    before = inventory.sessions()

    tmux.layout = []
    with pytest.raises(NoSessionsFound):
        inventory.refresh()
    assert inventory.sessions() == before


def test_empty_listing_raises_no_sessions():
    class _Empty:
        def run(self, command):
            return "\n"

    with pytest.raises(NoSessionsFound):
        TmuxInventory(_Empty()).refresh()


def test_spawn_failure_propagates_and_keeps_snapshot():
    tmux = FakeTmux(_dev_layout())
    inventory = TmuxInventory(tmux)
    inventory.refresh()

    tmux.fail("list-sessions", ProcessSpawnFailed("tmux: command not found"))
    with pytest.raises(ProcessSpawnFailed):
        inventory.refresh()
    assert len(inventory.sessions()) == 1


def test_other_list_sessions_errors_propagate():
    tmux = FakeTmux(_dev_layout())
    tmux.fail("list-sessions", CommandFailed("tmux list-sessions", 1, "protocol version mismatch"))
    with pytest.raises(CommandFailed):
        TmuxInventory(tmux).refresh()


def test_pane_query_failure_degrades_window(null_logger):
    tmux = FakeTmux(_dev_layout())
    tmux.fail("list-panes", CommandFailed("tmux list-panes", 1, "can't find window"))
    inventory = TmuxInventory(tmux, null_logger)
    inventory.refresh()

    [dev] = inventory.sessions()
    assert len(dev.windows) == 1
    assert not dev.windows[0].has_editor
    assert not dev.has_editor
    assert any(record[1] == "list_panes" for record in null_logger.records)


def test_missing_window_index_is_skipped():
    # base-index 1: the window count is 1 but the only window has index 1
    layout = [session("$1", "dev", [window(1, "/a", panes=[(0, "vim")])])]
    inventory = TmuxInventory(FakeTmux(layout))
    inventory.refresh()

    assert inventory.sessions()[0].windows == []


def test_search_roots_cover_selected_sessions_only():
    layout = [
        session("$1", "dev", [window(0, "/a"), window(1, "/b"), window(2, "/a")]),
        session("$2", "ops", [window(0, "/c")]),
    ]
    inventory = TmuxInventory(FakeTmux(layout))
    inventory.refresh()
    inventory.toggle_selection("$2")

    assert inventory.search_roots() == ["/a", "/b"]
    assert [s.name for s in inventory.selected_sessions()] == ["dev"]


def test_custom_editor_pattern_and_tmux_command():
    layout = [session("$1", "dev", [window(0, "/a", panes=[(0, "nvim"), (1, "hx")])])]
    tmux = FakeTmux(layout)
    inventory = TmuxInventory(tmux, editor_pattern=r"^hx$", tmux_command="tmux")
    inventory.refresh()

    assert inventory.sessions()[0].windows[0].editor_pane_index == 1
