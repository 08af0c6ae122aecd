"""In-memory, insertion-ordered mark store."""

from __future__ import annotations

import os

from .errors import InvalidMarkTarget
from .models import Mark


class MarkStore:
    def __init__(self) -> None:
        self._marks: list[Mark] = []

    def add(
        self,
        path: str,
        line: int,
        display_name: str | None = None,
        buftype: str = "",
        must_exist: bool = False,
    ) -> Mark:
        """Append a mark on ``path`` at ``line``.

        ``buftype`` is the editor's buffer type of the source buffer; any
        non-empty value (help, terminal, quickfix...) means the buffer is not
        a file and cannot be marked. With ``must_exist`` the path has to be
        present on disk; editor buffers may name files not yet written.
        """
        if not path or not path.strip() or buftype:
            raise InvalidMarkTarget("Cannot mark this buffer")
        if line < 1:
            raise InvalidMarkTarget(f"Cannot mark line {line}")

        file_path = os.path.abspath(os.path.expanduser(path.strip()))
        if must_exist and not os.path.exists(file_path):
            raise InvalidMarkTarget(f"No such file: {file_path}")
        mark = Mark(
            file_path=file_path,
            line=line,
            display_name=display_name or os.path.basename(file_path) or file_path,
        )
        self._marks.append(mark)
        return mark

    def remove(self, index: int) -> Mark | None:
        """Delete the mark at 1-based ``index``; out of range is a no-op."""
        if index < 1 or index > len(self._marks):
            return None
        return self._marks.pop(index - 1)

    def get(self, index: int) -> Mark | None:
        if index < 1 or index > len(self._marks):
            return None
        return self._marks[index - 1]

    def list(self) -> list[Mark]:
        return list(self._marks)

    def __len__(self) -> int:
        return len(self._marks)
