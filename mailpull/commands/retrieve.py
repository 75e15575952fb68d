"""Mailbox retrieval command."""

from __future__ import annotations

import logging

from ..client import MailClient
from ..config import Config
from ..search import RetrievalMode
from ..text import visible_text

logger = logging.getLogger("mailpull")


def fetch_cmd(config: Config, mode: RetrievalMode, show_text: bool = False) -> int:
    """Stream messages from the configured folder and print a line per message.

    Args:
        config: Application configuration
        mode: Which messages to retrieve
        show_text: Also print the visible text of each body

    Returns:
        Process exit status: 0 on success, 1 if connecting failed or the
        stream ended with an error
    """
    try:
        client = MailClient.open(config)
    except Exception as e:
        logger.error(f"Unable to connect to {config.imap.host}: {e}")
        return 1

    with client:
        print(f"{'UID':<8} {'From':<30} {'Subject':<50}")
        print("-" * 90)

        count = 0
        for response in client.generate(mode):
            if not response.ok:
                logger.error(f"Retrieval stopped after {count} emails: {response.error}")
                return 1

            email = response.email
            from_addr = (email.from_addr or "")[:28]
            subject = (email.subject or "")[:48]
            print(f"{email.uid:<8} {from_addr:<30} {subject:<50}")
            if show_text:
                for fragment in visible_text(email.body()):
                    print(f"    {fragment}")
            count += 1

        print(f"\nTotal: {count} emails")
    return 0
