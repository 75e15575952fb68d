"""Mailbox retrieval over IMAP.

This package streams messages from one selected IMAP folder:
- MailClient: connect from a Config and retrieve all, unread or recent mail
- FetchPipeline: the search, fetch, parse and flag worker behind MailClient
- visible_text: extract the rendered text of an HTML body

Retrievals produce a ResponseStream of Response items; an error response,
if any, is the last item of its stream.
"""

from .client import MailClient
from .config import Config, ImapConfig, RetrievalConfig, load_config
from .email import Email, Response
from .errors import (
    ExtractionError,
    FetchError,
    FlagMutationError,
    MailpullError,
    ParseError,
    SearchError,
)
from .flags import FlagMutator
from .parser import parse_record
from .pipeline import FetchPipeline, ResponseStream, collect
from .search import RetrievalMode, SearchKind, plan_search
from .session import ImapSession, Session
from .text import VisibleTextExtractor, visible_text

__all__ = [
    # client
    "MailClient",
    # config
    "Config",
    "ImapConfig",
    "RetrievalConfig",
    "load_config",
    # email
    "Email",
    "Response",
    # errors
    "ExtractionError",
    "FetchError",
    "FlagMutationError",
    "MailpullError",
    "ParseError",
    "SearchError",
    # pipeline
    "FetchPipeline",
    "FlagMutator",
    "ResponseStream",
    "collect",
    "parse_record",
    # search
    "RetrievalMode",
    "SearchKind",
    "plan_search",
    # session
    "ImapSession",
    "Session",
    # text
    "VisibleTextExtractor",
    "visible_text",
]
