"""Command implementations for mailpull CLI."""

from .retrieve import fetch_cmd
from .text import text_cmd
from .utils import apply_cli_overrides, parse_mode

__all__ = [
    # retrieve
    "fetch_cmd",
    # text
    "text_cmd",
    # utils
    "apply_cli_overrides",
    "parse_mode",
]
