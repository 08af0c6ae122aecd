"""Configuration loader for tmux-marks."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/tmux-marks/config.json").expanduser()
DEFAULT_LOG_PATH = Path("~/.local/state/tmux-marks/log.jsonl").expanduser()
DEFAULT_COLOR = "auto"
DEFAULT_DEBUG = False
DEFAULT_COMMAND_TIMEOUT = 5.0
# Matches "vim" and "nvim" (and anything else containing "vim").
DEFAULT_EDITOR_PATTERN = r"n?vim"
DEFAULT_TMUX_COMMAND = "tmux"


@dataclass
class Config:
    config_path: Path
    log_path: Path
    color: str
    debug: bool
    command_timeout: float = field(default_factory=lambda: DEFAULT_COMMAND_TIMEOUT)
    editor_pattern: str = field(default_factory=lambda: DEFAULT_EDITOR_PATTERN)
    tmux_command: str = field(default_factory=lambda: DEFAULT_TMUX_COMMAND)

    def editor_regex(self) -> re.Pattern[str]:
        return re.compile(self.editor_pattern)


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    return normalized in {"1", "true", "yes", "y", "on"}


def _safe_float(value: Any, default: float) -> float:
    try:
        parsed = float(str(value).strip())
    except (ValueError, TypeError):
        return default
    return parsed if parsed > 0 else default


def _safe_pattern(value: Any, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    try:
        re.compile(value)
    except re.error:
        return default
    return value


def load_config(path: str | None = None) -> Config:
    env_path = os.environ.get("TMUX_MARKS_CONFIG")
    config_path = Path(path or env_path or DEFAULT_CONFIG_PATH).expanduser()

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            data = {}
    if not isinstance(data, dict):
        data = {}

    log_path = Path(
        os.environ.get("TMUX_MARKS_LOG")
        or data.get("log_path")
        or str(DEFAULT_LOG_PATH)
    ).expanduser()

    color = (
        os.environ.get("TMUX_MARKS_COLOR")
        or data.get("color")
        or DEFAULT_COLOR
    )

    if "TMUX_MARKS_DEBUG" in os.environ:
        debug = _parse_bool(os.environ["TMUX_MARKS_DEBUG"])
    else:
        debug = bool(data.get("debug", DEFAULT_DEBUG))

    command_timeout = _safe_float(
        os.environ.get("TMUX_MARKS_COMMAND_TIMEOUT") or data.get("command_timeout"),
        DEFAULT_COMMAND_TIMEOUT,
    )

    editor_pattern = _safe_pattern(
        os.environ.get("TMUX_MARKS_EDITOR_PATTERN") or data.get("editor_pattern"),
        DEFAULT_EDITOR_PATTERN,
    )

    tmux_command = (
        os.environ.get("TMUX_MARKS_TMUX")
        or data.get("tmux_command")
        or DEFAULT_TMUX_COMMAND
    )

    return Config(
        config_path=config_path,
        log_path=log_path,
        color=str(color).strip().lower(),
        debug=debug,
        command_timeout=command_timeout,
        editor_pattern=editor_pattern,
        tmux_command=str(tmux_command).strip() or DEFAULT_TMUX_COMMAND,
    )
