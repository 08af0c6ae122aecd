"""JSONL logger for tmux-marks."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

_WARNED_WRITE_FAILURE = False


@dataclass
class Logger:
    log_path: Path
    debug_enabled: bool = False

    def _write(self, record: dict[str, Any]) -> None:
        global _WARNED_WRITE_FAILURE
        line = json.dumps(record, ensure_ascii=True)
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as exc:
            if not _WARNED_WRITE_FAILURE:
                _WARNED_WRITE_FAILURE = True
                print(f"tmux-marks: failed to write log {self.log_path}: {exc}", file=sys.stderr)

    def log(self, level: str, event: str, message: str, session_name: str | None = None) -> None:
        ts = datetime.now().astimezone().isoformat()
        record = {
            "ts": ts,
            "level": level.upper(),
            "event": event,
            "session_name": session_name,
            "message": message,
        }
        self._write(record)

    def debug(self, event: str, message: str, session_name: str | None = None) -> None:
        if self.debug_enabled:
            self.log("DEBUG", event, message, session_name=session_name)

    def info(self, event: str, message: str, session_name: str | None = None) -> None:
        self.log("INFO", event, message, session_name=session_name)

    def warn(self, event: str, message: str, session_name: str | None = None) -> None:
        self.log("WARN", event, message, session_name=session_name)

    def error(self, event: str, message: str, session_name: str | None = None) -> None:
        self.log("ERROR", event, message, session_name=session_name)
