"""Turn raw UID FETCH records into Email objects."""

import io
import re
from datetime import datetime
from email import policy
from email.parser import HeaderParser

from .email import Email
from .errors import ParseError
from .session import RawRecord

# Fetch items requested for every message, in wire order
FETCH_FIELDS = ["INTERNALDATE", "BODY[]", "UID", "RFC822.HEADER"]
HEADER_FIELD = "RFC822.HEADER"

# field-name is printable ASCII except ":" (RFC 5322 section 3.6.8)
_FIELD_LINE_RE = re.compile(rb"^[\x21-\x39\x3b-\x7e]+[ \t]*:")
_FOLD_RE = re.compile(r"\r?\n[ \t]+")


def is_complete(record: RawRecord) -> bool:
    """Check that a fetch record carries a header block.

    Servers such as Gmail may send unsolicited FETCH responses holding only
    FLAGS; those records are incomplete. A missing BODY[] or INTERNALDATE
    does not make a record incomplete.
    """
    return HEADER_FIELD in record


def _as_bytes(value: object) -> bytes:
    if value is None:
        return b""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8", errors="surrogateescape")
    return str(value).encode("ascii")


def split_message(data: bytes) -> tuple[list[bytes], bytes]:
    """Split raw message bytes at the first blank line."""
    stream = io.BytesIO(data)
    header_lines = []
    for line in iter(stream.readline, b""):
        if line in (b"\r\n", b"\n"):
            break
        header_lines.append(line)
    return header_lines, stream.read()


def _check_header_syntax(lines: list[bytes]) -> None:
    for index, line in enumerate(lines):
        if line[:1] in (b" ", b"\t"):
            if index == 0:
                raise ParseError(f"malformed initial header line: {line!r}")
            continue
        if not _FIELD_LINE_RE.match(line):
            raise ParseError(f"malformed header line: {line!r}")


def parse_record(record: RawRecord) -> Email:
    """Build an Email from a complete fetch record.

    The message is assembled as the header block, a blank line, then the
    body, and its header section is parsed with the email package. A
    missing BODY[] counts as empty and a missing INTERNALDATE as unknown.

    Raises:
        ParseError: If the header block is malformed or the UID is unusable
    """
    data = _as_bytes(record.get(HEADER_FIELD)) + b"\n\n" + _as_bytes(record.get("BODY[]"))
    header_lines, body = split_message(data)
    _check_header_syntax(header_lines)

    header_text = b"".join(header_lines).decode("utf-8", errors="replace")
    parsed = HeaderParser(policy=policy.compat32).parsestr(header_text)
    items = tuple((name, _FOLD_RE.sub(" ", str(value)).strip()) for name, value in parsed.items())

    try:
        uid = int(record["UID"])
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"invalid UID in fetch record: {record.get('UID')!r}") from e

    internal_date = record.get("INTERNALDATE")
    if not isinstance(internal_date, datetime):
        internal_date = None

    return Email(uid=uid, header_items=items, raw_body=body, internal_date=internal_date)
