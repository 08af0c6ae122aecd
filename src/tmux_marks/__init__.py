"""Jump to files in the editors running inside tmux sessions."""

__version__ = "0.1.0"
