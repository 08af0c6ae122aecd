"""Curses prompt helpers."""

from __future__ import annotations

import curses


def safe_addstr(
    stdscr: curses._CursesWindow,
    y: int,
    x: int,
    text: str,
    attr: int = 0,
) -> None:
    height, width = stdscr.getmaxyx()
    if y < 0 or y >= height or x < 0 or x >= width:
        return
    if x + len(text) >= width:
        text = text[: max(0, width - x - 1)]
    try:
        stdscr.addstr(y, x, text, attr)
    except curses.error:
        pass


def set_cursor_visibility(visible: int) -> None:
    try:
        curses.curs_set(visible)
    except curses.error:
        pass


def prompt_input_popup(
    stdscr: curses._CursesWindow,
    title: str,
    default: str = "",
    prompt: str = "path:line",
    help_text: str = "Enter=confirm  Esc=cancel",
    max_len: int = 1024,
) -> str | None:
    """Read one line of text in a centered popup; ``None`` when cancelled."""
    height, width = stdscr.getmaxyx()
    set_cursor_visibility(1)
    stdscr.nodelay(False)
    stdscr.timeout(-1)

    buffer: list[str] = list(default)
    center_y = height // 2
    while True:
        for row in range(center_y - 2, center_y + 3):
            safe_addstr(stdscr, row, 0, " " * width)
        safe_addstr(stdscr, center_y - 1, max(0, (width - len(title)) // 2), title)
        safe_addstr(stdscr, center_y, max(0, (width - len(prompt)) // 2), prompt)

        shown = "".join(buffer)
        max_input_width = max(1, width - 4)
        if len(shown) > max_input_width:
            shown = "~" + shown[-(max_input_width - 1):]
        input_x = max(2, (width - len(shown)) // 2)
        safe_addstr(stdscr, center_y + 1, input_x, shown)
        safe_addstr(stdscr, center_y + 2, max(0, (width - len(help_text)) // 2), help_text)
        try:
            stdscr.move(center_y + 1, input_x + len(shown))
        except curses.error:
            pass
        stdscr.refresh()

        try:
            key = stdscr.get_wch()
        except curses.error:
            continue

        if key in ("\n", "\r", 10, 13, curses.KEY_ENTER):
            break
        if key in ("\x1b", 27):
            set_cursor_visibility(0)
            return None
        if key in ("\x7f", "\b", curses.KEY_BACKSPACE, 127, 8):
            if buffer:
                buffer.pop()
            continue
        if isinstance(key, str) and key.isprintable() and len(buffer) < max_len:
            buffer.append(key)

    set_cursor_visibility(0)
    value = "".join(buffer).strip()
    return value or None
