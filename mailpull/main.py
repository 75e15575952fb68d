"""Main entry point for mailpull.

Re-exports the CLI entry point and command functions.
"""

from __future__ import annotations

from .cli import main
from .commands import apply_cli_overrides, fetch_cmd, parse_mode, text_cmd

__all__ = [
    "main",
    "apply_cli_overrides",
    "fetch_cmd",
    "parse_mode",
    "text_cmd",
]

if __name__ == "__main__":
    main()
