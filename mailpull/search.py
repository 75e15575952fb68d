"""Translate retrieval modes into IMAP search criteria."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

# IMAP dates use English month abbreviations regardless of locale
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class SearchKind(str, Enum):
    """Which messages a retrieval selects."""
    ALL = "ALL"
    UNREAD = "UNSEEN"
    SINCE = "SINCE"


@dataclass(frozen=True)
class RetrievalMode:
    kind: SearchKind
    since: date | None = None

    def __post_init__(self):
        if self.kind is SearchKind.SINCE and self.since is None:
            raise ValueError("SINCE retrieval requires a date")

    @classmethod
    def all(cls) -> "RetrievalMode":
        return cls(SearchKind.ALL)

    @classmethod
    def unread(cls) -> "RetrievalMode":
        return cls(SearchKind.UNREAD)

    @classmethod
    def since_date(cls, since: date) -> "RetrievalMode":
        return cls(SearchKind.SINCE, since)


def format_imap_date(value: date) -> str:
    """Format a date as DD-Mon-YYYY for IMAP search criteria."""
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day:02d}-{_MONTHS[value.month - 1]}-{value.year:04d}"


def plan_search(mode: RetrievalMode) -> list[str]:
    """Return the search terms for a retrieval mode.

    Examples:
        ALL            -> ["ALL"]
        UNREAD         -> ["UNSEEN"]
        SINCE 2006-1-2 -> ["SINCE", "02-Jan-2006"]
    """
    if mode.kind is SearchKind.SINCE:
        return [SearchKind.SINCE.value, format_imap_date(mode.since)]
    return [mode.kind.value]
