"""Configuration management for mailpull."""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


@dataclass
class ImapConfig:
    """IMAP server configuration.

    Credentials MUST be provided via environment variables:
    - MAILPULL_IMAP_USERNAME: IMAP username
    - MAILPULL_IMAP_PASSWORD: IMAP password
    """
    host: str
    port: int = 993
    username: str = ""
    password: str = field(default="", repr=False)
    use_ssl: bool = True
    folder: str = "INBOX"
    read_only: bool = False  # SELECT with EXAMINE semantics

    def __post_init__(self):
        """Load credentials from environment variables."""
        env_username = os.environ.get("MAILPULL_IMAP_USERNAME")
        env_password = os.environ.get("MAILPULL_IMAP_PASSWORD")

        if env_username:
            self.username = env_username
        if env_password:
            self.password = env_password


@dataclass
class RetrievalConfig:
    """Retrieval behaviour.

    queue_size bounds how many responses a retrieval worker may buffer
    before it blocks waiting for the consumer.
    """
    queue_size: int = DEFAULT_QUEUE_SIZE
    mark_as_read: bool = True
    delete: bool = False

    def __post_init__(self):
        if self.queue_size < 1:
            raise ValueError(f"queue_size must be at least 1, got {self.queue_size}")


@dataclass
class Config:
    imap: ImapConfig
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)


def load_config(path: str | Path) -> Config:
    """Load configuration from a TOML file."""
    path = Path(path)
    with path.open("rb") as f:
        data = tomllib.load(f)

    imap_data = data.get("imap", {})
    imap_config = ImapConfig(
        host=imap_data.get("host", ""),
        port=imap_data.get("port", 993),
        username=imap_data.get("username", ""),
        use_ssl=imap_data.get("use_ssl", True),
        folder=imap_data.get("folder", "INBOX"),
        read_only=imap_data.get("read_only", False),
    )

    retrieval_data = data.get("retrieval", {})
    retrieval_config = RetrievalConfig(
        queue_size=retrieval_data.get("queue_size", DEFAULT_QUEUE_SIZE),
        mark_as_read=retrieval_data.get("mark_as_read", True),
        delete=retrieval_data.get("delete", False),
    )

    logger.debug(f"Loaded configuration from {path}")
    return Config(imap=imap_config, retrieval=retrieval_config)
