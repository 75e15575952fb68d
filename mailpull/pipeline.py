"""Search, fetch, parse and flag messages on a worker thread.

A retrieval runs on one dedicated thread that is the only producer into a
bounded ResponseStream. The caller consumes the stream in emission order;
the end of the stream is the only completion signal. An error response,
when present, is always the last item.
"""

import asyncio
import logging
import queue
import threading
from collections.abc import AsyncIterator, Iterator

from .config import DEFAULT_QUEUE_SIZE
from .email import Response
from .errors import FetchError, FlagMutationError, MailpullError, ParseError, SearchError
from .flags import FlagMutator
from .parser import FETCH_FIELDS, is_complete, parse_record
from .search import RetrievalMode, plan_search
from .session import Session

logger = logging.getLogger("mailpull")

_END = object()


class ResponseStream:
    """Bounded, single-producer single-consumer queue of responses."""

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE):
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._finished = False

    def put(self, response: Response) -> None:
        """Add a response, blocking while the stream is full."""
        self._queue.put(response)

    def close(self) -> None:
        self._queue.put(_END)

    def get(self) -> Response | None:
        """Return the next response, or None once the stream has ended."""
        if self._finished:
            return None
        item = self._queue.get()
        if item is _END:
            self._finished = True
            return None
        return item

    def __iter__(self) -> Iterator[Response]:
        while True:
            response = self.get()
            if response is None:
                return
            yield response

    async def __aiter__(self) -> AsyncIterator[Response]:
        loop = asyncio.get_running_loop()
        while True:
            response = await loop.run_in_executor(None, self.get)
            if response is None:
                return
            yield response


class FetchPipeline:
    """Retrieve messages from a session into a ResponseStream.

    The session must not be used by anything else while a retrieval is
    running. No operation is retried and a running worker cannot be
    cancelled; it stops when it runs out of messages or hits an error.
    """

    def __init__(self, session: Session, queue_size: int = DEFAULT_QUEUE_SIZE):
        self.session = session
        self.flags = FlagMutator(session)
        self.queue_size = queue_size

    def start(
        self,
        mode: RetrievalMode,
        mark_as_read: bool = True,
        delete: bool = False,
    ) -> ResponseStream:
        """Start a retrieval worker and return its stream."""
        stream = ResponseStream(self.queue_size)
        worker = threading.Thread(
            target=self.run,
            args=(mode, stream, mark_as_read, delete),
            name="mailpull-retrieval",
            daemon=True,
        )
        worker.start()
        return stream

    def run(
        self,
        mode: RetrievalMode,
        stream: ResponseStream,
        mark_as_read: bool = True,
        delete: bool = False,
    ) -> None:
        """Run a retrieval to completion on the calling thread."""
        try:
            self._retrieve(mode, stream, mark_as_read, delete)
        except Exception as e:
            self._fail(stream, MailpullError(f"retrieval failed: {e}"), e)
        finally:
            stream.close()

    def _retrieve(
        self,
        mode: RetrievalMode,
        stream: ResponseStream,
        mark_as_read: bool,
        delete: bool,
    ) -> None:
        terms = plan_search(mode)
        try:
            uids = self.session.search(terms)
        except Exception as e:
            self._fail(stream, SearchError(f"uid search failed: {e}"), e)
            return

        # Ordered de-duplication keeps the server's order
        batch = list(dict.fromkeys(uids))
        logger.info(f"Search {' '.join(terms)} matched {len(batch)} messages")
        if not batch:
            return

        try:
            records = self.session.fetch(batch, FETCH_FIELDS)
        except Exception as e:
            self._fail(stream, FetchError(f"unable to perform uid fetch: {e}"), e)
            return

        for record in records:
            if not is_complete(record):
                logger.debug(f"Skipping partial fetch record with items {sorted(record)}")
                continue

            try:
                email_msg = parse_record(record)
            except ParseError as e:
                self._fail(stream, ParseError(f"unable to parse email: {e}"), e)
                return

            stream.put(Response.success(email_msg))

            if not mark_as_read:
                try:
                    self.flags.mark_unread(email_msg.uid)
                except Exception as e:
                    self._fail(stream, FlagMutationError(f"unable to remove seen flag: {e}"), e)
                    return

            if delete:
                try:
                    self.flags.mark_deleted(email_msg.uid)
                except Exception as e:
                    self._fail(stream, FlagMutationError(f"unable to delete email: {e}"), e)
                    return

    @staticmethod
    def _fail(stream: ResponseStream, error: MailpullError, cause: Exception) -> None:
        error.__cause__ = cause
        logger.error(str(error))
        stream.put(Response.failure(error))


def collect(stream: ResponseStream) -> list:
    """Drain a stream into a list of emails.

    Raises:
        MailpullError: The stream's terminal error, if it emitted one
    """
    emails = []
    for response in stream:
        if not response.ok:
            raise response.error
        emails.append(response.email)
    return emails
