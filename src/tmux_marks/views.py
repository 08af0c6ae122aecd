"""Text views for sessions and marks.

Each view records, at render time, which entity every displayed row shows;
key handlers look the entity up by row instead of recomputing it from
header sizes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .models import Mark, Session

T = TypeVar("T")

SEPARATOR = "─" * 38


@dataclass
class RenderedView(Generic[T]):
    title: str
    lines: list[str]
    rows: dict[int, T] = field(default_factory=dict)

    def entity_at(self, row: int) -> T | None:
        return self.rows.get(row)

    def selectable_rows(self) -> list[int]:
        return sorted(self.rows)

    def step(self, row: int | None, delta: int) -> int | None:
        """Move from ``row`` to the previous/next selectable row."""
        rows = self.selectable_rows()
        if not rows:
            return None
        if row not in self.rows:
            return rows[0]
        position = rows.index(row) + delta
        return rows[max(0, min(position, len(rows) - 1))]


def render_sessions(sessions: list[Session]) -> RenderedView[str]:
    """Render sessions; rows map to session ids."""
    lines = [
        "  Space: Toggle for Search | r: Refresh | Tab: Marks | q: Close",
        SEPARATOR,
    ]
    rows: dict[int, str] = {}
    if not sessions:
        lines.append("   (No tmux sessions found)")
    for session in sessions:
        marker = "[✓] " if session.selected else "[ ] "
        editor = "yes" if session.has_editor else "no"
        attached = "attached" if session.attached else "detached"
        rows[len(lines)] = session.id
        lines.append(
            f" {marker}{session.name} (Windows: {len(session.windows)}, {attached}, Editor: {editor})"
        )
    return RenderedView(title=" Tmux Sessions ", lines=lines, rows=rows)


def render_marks(marks: list[Mark]) -> RenderedView[int]:
    """Render marks; rows map to the mark's 1-based position."""
    lines = [
        "  Enter: Jump | d: Delete | a: Add | Tab: Sessions | q: Close",
        SEPARATOR,
    ]
    rows: dict[int, int] = {}
    if not marks:
        lines.append("   (No marks saved)")
    for position, mark in enumerate(marks, start=1):
        rows[len(lines)] = position
        lines.append(f" [{position}] {mark.display_name} (Line: {mark.line})")
    return RenderedView(title=" Saved Marks ", lines=lines, rows=rows)
