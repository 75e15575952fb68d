"""Email and stream response types."""

import email
import email.message
import io
from dataclasses import dataclass
from datetime import datetime
from email.header import decode_header
from typing import BinaryIO

from .errors import MailpullError


def decode_mime_header(header: str | None) -> str:
    """Decode a MIME-encoded email header."""
    if header is None:
        return ""
    decoded_parts = decode_header(header)
    result = []
    for part, charset in decoded_parts:
        if isinstance(part, bytes):
            try:
                result.append(part.decode(charset or "utf-8", errors="replace"))
            except LookupError:
                # Unknown charset label such as unknown-8bit
                result.append(part.decode("utf-8", errors="replace"))
        else:
            result.append(part)
    return "".join(result)


@dataclass(frozen=True)
class Email:
    """A message fetched from the mailbox.

    Headers are kept in the order the server sent them; the body is the raw
    bytes following the header block, with no MIME decoding applied.
    """

    uid: int
    header_items: tuple[tuple[str, str], ...]
    raw_body: bytes
    internal_date: datetime | None = None

    @property
    def headers(self) -> dict[str, list[str]]:
        """Ordered mapping of header name to all of its values."""
        result: dict[str, list[str]] = {}
        for name, value in self.header_items:
            result.setdefault(name, []).append(value)
        return result

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of a header, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.header_items:
            if key.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> list[str]:
        wanted = name.lower()
        return [value for key, value in self.header_items if key.lower() == wanted]

    @property
    def subject(self) -> str:
        return decode_mime_header(self.get_header("Subject"))

    @property
    def from_addr(self) -> str:
        return decode_mime_header(self.get_header("From"))

    @property
    def message_id(self) -> str:
        return self.get_header("Message-ID", f"<uid-{self.uid}@local>")

    def body(self) -> BinaryIO:
        """Return a new stream over the raw body bytes."""
        return io.BytesIO(self.raw_body)

    def to_message(self) -> email.message.Message:
        """Rebuild a stdlib message object from the headers and body."""
        header_block = "".join(f"{name}: {value}\r\n" for name, value in self.header_items)
        return email.message_from_bytes(
            header_block.encode("utf-8", errors="surrogateescape") + b"\r\n" + self.raw_body
        )


@dataclass(frozen=True)
class Response:
    """One item of a retrieval stream: either an email or the terminal error."""

    email: Email | None = None
    error: MailpullError | None = None

    def __post_init__(self):
        if (self.email is None) == (self.error is None):
            raise ValueError("Response needs exactly one of email or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, email_msg: Email) -> "Response":
        return cls(email=email_msg)

    @classmethod
    def failure(cls, error: MailpullError) -> "Response":
        return cls(error=error)
