"""Visible text command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..errors import ExtractionError
from ..text import visible_text

logger = logging.getLogger("mailpull")


def text_cmd(path: Path | None = None, track_nesting: bool = False) -> int:
    """Print the visible text fragments of an HTML file, one per line.

    Reads standard input when no path is given.
    """
    try:
        if path is None:
            fragments = visible_text(sys.stdin.buffer, track_nesting=track_nesting)
        else:
            with path.open("rb") as f:
                fragments = visible_text(f, track_nesting=track_nesting)
    except ExtractionError as e:
        for fragment in e.fragments:
            print(fragment)
        logger.error(str(e))
        return 1

    for fragment in fragments:
        print(fragment)
    return 0
