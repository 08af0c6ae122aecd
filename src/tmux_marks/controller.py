"""Operations exposed to the display surface and to search providers."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .config import Config
from .jump import JumpOrchestrator, JumpTarget
from .logger import Logger
from .marks import MarkStore
from .models import Mark, Session
from .process_runner import ProcessRunner
from .tmux_manager import CommandRunner, TmuxInventory

_GREP_LINE = re.compile(r":(\d+):")
_HIT_STRING = re.compile(r"^(?P<path>.+?):(?P<line>\d+)(?::.*)?$")


def _entry_value(entry: Any, key: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(key)
    return getattr(entry, key, None)


def _positive_int(value: Any) -> int | None:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


@dataclass(frozen=True)
class SearchHit:
    path: str
    line: int = 1

    @classmethod
    def from_entry(cls, entry: Any) -> SearchHit | None:
        """Build a hit from a search provider entry.

        The path comes from ``path``, ``filename`` or ``value``; the line from
        ``lnum``, ``row`` or ``line``, else from a ``:<n>:`` fragment of
        ``value``. Missing lines default to 1.
        """
        if entry is None:
            return None
        value = _entry_value(entry, "value")
        path = _entry_value(entry, "path") or _entry_value(entry, "filename")
        if not path and isinstance(value, str):
            parsed = cls.parse(value)
            if parsed is not None:
                return parsed
            path = value
        if not path:
            return None

        line = None
        for key in ("lnum", "row", "line"):
            line = _positive_int(_entry_value(entry, key))
            if line is not None:
                break
        if line is None and isinstance(value, str):
            match = _GREP_LINE.search(value)
            if match:
                line = _positive_int(match.group(1))
        return cls(path=str(path), line=line or 1)

    @classmethod
    def parse(cls, text: str) -> SearchHit | None:
        """Parse a ``path:line[:column][:text]`` grep hit."""
        match = _HIT_STRING.match(text.strip())
        if not match:
            return None
        line = _positive_int(match.group("line"))
        if line is None:
            return None
        return cls(path=match.group("path"), line=line)


class MarksController:
    """Owns the inventory, the marks and the jump orchestrator.

    Created once at startup; all state changes go through its methods.
    """

    def __init__(
        self,
        runner: CommandRunner,
        logger: Logger | None = None,
        editor_pattern: str | re.Pattern[str] | None = None,
        tmux_command: str = "tmux",
    ) -> None:
        self.logger = logger
        inventory_kwargs: dict[str, Any] = {"tmux_command": tmux_command}
        if editor_pattern:
            inventory_kwargs["editor_pattern"] = editor_pattern
        self.inventory = TmuxInventory(runner, logger, **inventory_kwargs)
        self.marks = MarkStore()
        self.jumper = JumpOrchestrator(self.inventory, runner, logger, tmux_command=tmux_command)

    @classmethod
    def from_config(cls, config: Config, logger: Logger) -> MarksController:
        runner = ProcessRunner(timeout=config.command_timeout, logger=logger)
        return cls(
            runner,
            logger,
            editor_pattern=config.editor_regex(),
            tmux_command=config.tmux_command,
        )

    def refresh_sessions(self) -> list[Session]:
        self.inventory.refresh()
        return self.inventory.sessions()

    def list_sessions(self) -> list[Session]:
        return self.inventory.sessions()

    def toggle_selection(self, session_id: str) -> bool:
        return self.inventory.toggle_selection(session_id)

    def search_roots(self) -> list[str]:
        return self.inventory.search_roots()

    def list_marks(self) -> list[Mark]:
        return self.marks.list()

    def add_mark(
        self,
        path: str,
        line: int,
        display_name: str | None = None,
        buftype: str = "",
        must_exist: bool = False,
    ) -> Mark:
        mark = self.marks.add(path, line, display_name=display_name, buftype=buftype, must_exist=must_exist)
        if self.logger:
            self.logger.info("mark", f"marked {mark.display_name} at line {mark.line}")
        return mark

    def delete_mark(self, index: int) -> Mark | None:
        removed = self.marks.remove(index)
        if removed and self.logger:
            self.logger.info("mark_delete", f"deleted {removed.display_name}:{removed.line}")
        return removed

    def jump(self, path: str, line: int) -> JumpTarget:
        return self.jumper.jump(path, line)

    def jump_to_mark(self, index: int) -> JumpTarget | None:
        mark = self.marks.get(index)
        if mark is None:
            return None
        return self.jump(mark.file_path, mark.line)

    def jump_to_search_hit(self, entry: Any) -> JumpTarget | None:
        hit = entry if isinstance(entry, SearchHit) else SearchHit.from_entry(entry)
        if hit is None:
            return None
        return self.jump(hit.path, hit.line)
