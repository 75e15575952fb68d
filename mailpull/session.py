"""IMAP session capability used by the retrieval pipeline."""

import contextlib
import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from imapclient import IMAPClient

from .config import ImapConfig

logger = logging.getLogger("mailpull")

RawRecord = dict[str, object]


@runtime_checkable
class Session(Protocol):
    """UID-based mailbox operations on an already selected folder.

    Implementations are not safe for concurrent use.
    """

    def search(self, terms: list[str]) -> list[int]:
        """Run UID SEARCH and return matching UIDs."""
        ...

    def fetch(self, uids: Iterable[int], fields: list[str]) -> list[RawRecord]:
        """Run UID FETCH and return one record per response, in server order."""
        ...

    def store(self, uids: Iterable[int], op: str, flag: str) -> None:
        """Run UID STORE with op "+FLAGS" or "-FLAGS"."""
        ...


class ImapSession:
    """Session backed by an IMAPClient connection."""

    def __init__(self, config: ImapConfig):
        self.config = config
        self._client: IMAPClient | None = None

    def connect(self) -> None:
        """Connect, log in and select the configured folder."""
        client = IMAPClient(
            self.config.host,
            port=self.config.port,
            ssl=self.config.use_ssl,
        )
        client.login(self.config.username, self.config.password)
        client.select_folder(self.config.folder, readonly=self.config.read_only)
        self._client = client
        logger.info(
            f"Connected to {self.config.host}:{self.config.port}, "
            f"selected {self.config.folder}{' (read-only)' if self.config.read_only else ''}"
        )

    def disconnect(self) -> None:
        """Disconnect from the IMAP server."""
        if self._client:
            with contextlib.suppress(Exception):
                self._client.logout()
            self._client = None

    @property
    def client(self) -> IMAPClient:
        if self._client is None:
            raise RuntimeError("Not connected to IMAP server")
        return self._client

    def search(self, terms: list[str]) -> list[int]:
        return list(self.client.search(terms))

    def fetch(self, uids: Iterable[int], fields: list[str]) -> list[RawRecord]:
        response = self.client.fetch(list(uids), fields)
        records = []
        for msg_id, data in response.items():
            record: RawRecord = {}
            for key, value in data.items():
                name = key.decode("ascii") if isinstance(key, bytes) else str(key)
                if name == "SEQ":
                    continue
                record[name] = value
            # IMAPClient keys the response by UID instead of returning it as an item
            record.setdefault("UID", msg_id)
            records.append(record)
        return records

    def store(self, uids: Iterable[int], op: str, flag: str) -> None:
        if op == "+FLAGS":
            self.client.add_flags(list(uids), [flag])
        elif op == "-FLAGS":
            self.client.remove_flags(list(uids), [flag])
        else:
            raise ValueError(f"Unsupported store operation: {op}")

    def __enter__(self) -> "ImapSession":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
