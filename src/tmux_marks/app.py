"""Application entrypoint."""

from __future__ import annotations

import argparse
import json
import os
import sys

from . import __version__
from .config import load_config
from .controller import MarksController, SearchHit
from .environment import check_environment
from .errors import TmuxMarksError
from .input_handler import run_dashboard
from .logger import Logger


def _print_sessions(controller: MarksController, as_json: bool) -> None:
    sessions = controller.refresh_sessions()
    if as_json:
        print(json.dumps([session.to_dict() for session in sessions], indent=2))
        return
    for session in sessions:
        marker = "[✓]" if session.selected else "[ ]"
        print(
            f"{marker} Session ID: {session.id}, Name: {session.name}, "
            f"Windows: {len(session.windows)}, Attached: {session.attached}, "
            f"Editor: {'yes' if session.has_editor else 'no'}"
        )


def _print_roots(controller: MarksController) -> int:
    controller.refresh_sessions()
    roots = controller.search_roots()
    if not roots:
        print("No sessions selected for search.", file=sys.stderr)
        return 1
    for root in roots:
        print(root)
    return 0


def _print_resolved(controller: MarksController, path: str) -> int:
    controller.refresh_sessions()
    session = controller.inventory.resolve(os.path.abspath(path))
    if session is None:
        print("No tmux session found for this path.", file=sys.stderr)
        return 1
    print(session.name)
    return 0


def _jump(controller: MarksController, path: str, line: int | None) -> None:
    hit = SearchHit.parse(path) if line is None else None
    if hit is None:
        hit = SearchHit(path=path, line=line if line is not None else 1)
    target = controller.jump(os.path.abspath(hit.path), hit.line)
    print(f"Jumped to {target.pane_target}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmux-marks",
        description="Jump to files in the vim/nvim instances running in your tmux sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tmux-marks                         # Open the sessions/marks dashboard
  tmux-marks sessions --json         # Dump the session inventory
  tmux-marks roots                   # Search roots of the selected sessions
  tmux-marks jump src/app.py 42      # Open src/app.py:42 in the owning session's editor

Environment Variables:
  TMUX_MARKS_CONFIG           Path to config file (default: ~/.config/tmux-marks/config.json)
  TMUX_MARKS_LOG              Path to log file (default: ~/.local/state/tmux-marks/log.jsonl)
  TMUX_MARKS_COLOR            Color mode: auto/never (default: auto)
  TMUX_MARKS_DEBUG            Set to 1/true/yes to log every tmux command
  TMUX_MARKS_COMMAND_TIMEOUT  Seconds before a tmux command is abandoned (default: 5)
  TMUX_MARKS_EDITOR_PATTERN   Regex matched against pane commands (default: n?vim)
  TMUX_MARKS_TMUX             tmux executable (default: tmux)

Keybindings in Dashboard:
  Up/Down, j/k  Move
  Tab           Switch between sessions and marks
  Space         Toggle session for search
  r             Refresh sessions
  Enter         Jump to mark
  a             Add mark (path:line)
  d             Delete mark
  q or Ctrl+C   Exit
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to config file")

    subparsers = parser.add_subparsers(dest="command")
    sessions = subparsers.add_parser("sessions", help="List tmux sessions")
    sessions.add_argument("--json", action="store_true", help="Print the inventory as JSON")
    subparsers.add_parser("roots", help="Print search roots of selected sessions")
    resolve = subparsers.add_parser("resolve", help="Print the session owning a path")
    resolve.add_argument("path")
    jump = subparsers.add_parser("jump", help="Open a file in the owning session's editor")
    jump.add_argument("path", help="File path or path:line[:col:text] search hit")
    jump.add_argument("line", nargs="?", type=int)
    subparsers.add_parser("dashboard", help="Open the interactive dashboard")
    return parser


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    logger = Logger(config.log_path, debug_enabled=config.debug)
    controller = MarksController.from_config(config, logger)

    try:
        check_environment()
        command = args.command or "dashboard"
        if command == "sessions":
            _print_sessions(controller, args.json)
            return 0
        if command == "roots":
            return _print_roots(controller)
        if command == "resolve":
            return _print_resolved(controller, args.path)
        if command == "jump":
            _jump(controller, args.path, args.line)
            return 0
        run_dashboard(controller, config, logger)
        logger.info("exit", "dashboard exit")
        return 0
    except TmuxMarksError as exc:
        logger.error(args.command or "dashboard", str(exc))
        print(str(exc), file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
