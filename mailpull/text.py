"""Visible text extraction from HTML message bodies."""

import codecs
import io
from html.parser import HTMLParser
from typing import BinaryIO

from .errors import ExtractionError

# Elements whose content is never rendered
NON_VISIBLE_TAGS = frozenset({
    "style",
    "script",
    "head",
    "meta",
    "doctype",
    "v:shape",
    "v:imagedata",
    "!",
})

CHUNK_SIZE = 4096


class VisibleTextExtractor(HTMLParser):
    """Collect trimmed, non-empty text runs found outside non-visible elements.

    By default suppression is a single flag: any start tag from
    NON_VISIBLE_TAGS turns it on and any matching end tag turns it off, so a
    stray end tag re-enables text even inside another suppressed element.
    Pass track_nesting=True to count open elements per tag name instead.

    Character data between two markup tokens is one text run, even when it
    arrives across several reads.
    """

    def __init__(self, track_nesting: bool = False):
        super().__init__(convert_charrefs=True)
        self.track_nesting = track_nesting
        self.fragments: list[str] = []
        self._suppressed = False
        self._open: dict[str, int] = {}
        self._pending: list[str] = []

    @property
    def suppressed(self) -> bool:
        if self.track_nesting:
            return any(self._open.values())
        return self._suppressed

    def handle_starttag(self, tag, attrs):
        self._flush_text()
        if tag not in NON_VISIBLE_TAGS:
            return
        if self.track_nesting:
            self._open[tag] = self._open.get(tag, 0) + 1
        else:
            self._suppressed = True

    def handle_endtag(self, tag):
        self._flush_text()
        if tag not in NON_VISIBLE_TAGS:
            return
        if self.track_nesting:
            if self._open.get(tag):
                self._open[tag] -= 1
        else:
            self._suppressed = False

    def handle_startendtag(self, tag, attrs):
        # <meta ... /> opens nothing, so it must not toggle suppression
        self._flush_text()

    def handle_data(self, data):
        self._pending.append(data)

    def handle_comment(self, data):
        self._flush_text()

    def handle_decl(self, decl):
        self._flush_text()

    def handle_pi(self, data):
        self._flush_text()

    def unknown_decl(self, data):
        self._flush_text()

    def _flush_text(self) -> None:
        if not self._pending:
            return
        text = "".join(self._pending).strip()
        self._pending = []
        if text and not self.suppressed:
            self.fragments.append(text)

    def extract(self, source: BinaryIO | bytes | str) -> list[str]:
        """Tokenize source to the end and return the visible fragments.

        Raises:
            ExtractionError: If reading the source fails; the error carries
                the fragments found before the failure
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        elif isinstance(source, str):
            source = io.StringIO(source)

        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            try:
                chunk = source.read(CHUNK_SIZE)
            except Exception as e:
                raise ExtractionError(f"unable to read HTML: {e}", list(self.fragments)) from e
            if not chunk:
                break
            self.feed(decoder.decode(chunk) if isinstance(chunk, bytes) else chunk)

        self.feed(decoder.decode(b"", final=True))
        self._finish()
        return list(self.fragments)

    def _finish(self) -> None:
        # A tag cut off by the end of input is dropped, not reported as text
        cut = self.rawdata.find("<")
        if cut >= 0:
            self.rawdata = self.rawdata[:cut]
        self.close()
        self._flush_text()


def visible_text(source: BinaryIO | bytes | str, *, track_nesting: bool = False) -> list[str]:
    """Return the visible text fragments of an HTML document.

    Example:
        >>> visible_text(b"<head><style>.a{}</style></head><body>Hi <b>there</b></body>")
        ['Hi', 'there']
    """
    return VisibleTextExtractor(track_nesting=track_nesting).extract(source)
