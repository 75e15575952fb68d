"""Single-message flag changes."""

import logging

from .session import Session

logger = logging.getLogger("mailpull")

DELETED = "\\DELETED"
SEEN = "\\SEEN"

ADD_FLAGS = "+FLAGS"
REMOVE_FLAGS = "-FLAGS"


class FlagMutator:
    """Add or remove a flag on one message by UID.

    Each call is a single blocking UID STORE. Storing the same flag twice
    leaves the mailbox unchanged, so every operation is idempotent. Errors
    from the session propagate unchanged.
    """

    def __init__(self, session: Session):
        self.session = session

    def mark_deleted(self, uid: int) -> None:
        self._alter(uid, DELETED, add=True)

    def mark_unread(self, uid: int) -> None:
        self._alter(uid, SEEN, add=False)

    def mark_read(self, uid: int) -> None:
        self._alter(uid, SEEN, add=True)

    def _alter(self, uid: int, flag: str, add: bool) -> None:
        op = ADD_FLAGS if add else REMOVE_FLAGS
        logger.debug(f"UID STORE {uid} {op} {flag}")
        self.session.store([uid], op, flag)
