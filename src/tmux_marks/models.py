"""Data models for tmux-marks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PaneInfo:
    index: int
    current_command: str


@dataclass
class Window:
    index: int
    name: str
    working_directory: str
    editor_pane_index: int | None = None

    @property
    def has_editor(self) -> bool:
        return self.editor_pane_index is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "working_directory": self.working_directory,
            "has_editor": self.has_editor,
            "editor_pane_index": self.editor_pane_index,
        }


@dataclass
class Session:
    """A tmux session as seen by the last inventory refresh.

    ``id`` is the stable tmux identifier (``$3``); ``name`` may change between
    refreshes and is what commands address.
    """

    id: str
    name: str
    attached: bool
    windows: list[Window] = field(default_factory=list)
    selected: bool = True

    @property
    def has_editor(self) -> bool:
        return any(window.has_editor for window in self.windows)

    def first_editor_window(self) -> Window | None:
        for window in self.windows:
            if window.has_editor:
                return window
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "attached": self.attached,
            "selected": self.selected,
            "has_editor": self.has_editor,
            "windows": [window.to_dict() for window in self.windows],
        }


@dataclass(frozen=True)
class Mark:
    file_path: str
    line: int
    display_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"file_path": self.file_path, "line": self.line, "display_name": self.display_name}
