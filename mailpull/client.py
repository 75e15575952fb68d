"""High-level mailbox client."""

import logging
from datetime import date

from .config import Config, RetrievalConfig
from .email import Email
from .flags import FlagMutator
from .pipeline import FetchPipeline, ResponseStream, collect
from .search import RetrievalMode
from .session import ImapSession, Session

logger = logging.getLogger("mailpull")


class MailClient:
    """Retrieve and flag messages in one selected folder.

    The generate_* methods return a ResponseStream filled by a worker
    thread. The get_* methods drain such a stream into a list and raise the
    stream's terminal error, if any. Only one retrieval may use the session
    at a time; callers sharing a client across threads must serialize calls.
    """

    def __init__(self, session: Session, retrieval: RetrievalConfig | None = None):
        self.session = session
        self.retrieval = retrieval or RetrievalConfig()
        self.pipeline = FetchPipeline(session, queue_size=self.retrieval.queue_size)
        self.flags = FlagMutator(session)
        self._owned_session: ImapSession | None = None

    @classmethod
    def open(cls, config: Config) -> "MailClient":
        """Connect to the configured server and select its folder."""
        session = ImapSession(config.imap)
        session.connect()
        client = cls(session, config.retrieval)
        client._owned_session = session
        return client

    def close(self) -> None:
        """Log out if this client opened its own session."""
        if self._owned_session is not None:
            self._owned_session.disconnect()
            self._owned_session = None

    def __enter__(self) -> "MailClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def generate(
        self,
        mode: RetrievalMode,
        mark_as_read: bool | None = None,
        delete: bool | None = None,
    ) -> ResponseStream:
        if mark_as_read is None:
            mark_as_read = self.retrieval.mark_as_read
        if delete is None:
            delete = self.retrieval.delete
        logger.debug(f"Starting {mode.kind.name} retrieval (mark_as_read={mark_as_read}, delete={delete})")
        return self.pipeline.start(mode, mark_as_read=mark_as_read, delete=delete)

    def generate_all(self, mark_as_read: bool | None = None, delete: bool | None = None) -> ResponseStream:
        return self.generate(RetrievalMode.all(), mark_as_read, delete)

    def generate_unread(self, mark_as_read: bool | None = None, delete: bool | None = None) -> ResponseStream:
        return self.generate(RetrievalMode.unread(), mark_as_read, delete)

    def generate_since(
        self,
        since: date,
        mark_as_read: bool | None = None,
        delete: bool | None = None,
    ) -> ResponseStream:
        """Stream messages whose internal date is on or after since."""
        return self.generate(RetrievalMode.since_date(since), mark_as_read, delete)

    def get_all(self, mark_as_read: bool | None = None, delete: bool | None = None) -> list[Email]:
        return collect(self.generate_all(mark_as_read, delete))

    def get_unread(self, mark_as_read: bool | None = None, delete: bool | None = None) -> list[Email]:
        return collect(self.generate_unread(mark_as_read, delete))

    def get_since(
        self,
        since: date,
        mark_as_read: bool | None = None,
        delete: bool | None = None,
    ) -> list[Email]:
        return collect(self.generate_since(since, mark_as_read, delete))

    def delete_email(self, message: Email | int) -> None:
        self.flags.mark_deleted(_uid_of(message))

    def set_as_read(self, message: Email | int) -> None:
        self.flags.mark_read(_uid_of(message))

    def set_as_unread(self, message: Email | int) -> None:
        self.flags.mark_unread(_uid_of(message))


def _uid_of(message: Email | int) -> int:
    return message.uid if isinstance(message, Email) else int(message)
