"""Error types raised and emitted by mailpull."""


class MailpullError(Exception):
    """Base class for all mailpull errors."""


class SearchError(MailpullError):
    """UID search failed."""


class FetchError(MailpullError):
    """UID fetch failed."""


class ParseError(MailpullError):
    """A fetched record could not be parsed into an email."""


class FlagMutationError(MailpullError):
    """A flag store issued after emitting an email failed."""


class ExtractionError(MailpullError):
    """Reading an HTML stream failed before end of stream.

    The fragments extracted before the failure are kept on ``fragments``.
    """

    def __init__(self, message: str, fragments: list[str] | None = None):
        super().__init__(message)
        self.fragments = fragments or []
