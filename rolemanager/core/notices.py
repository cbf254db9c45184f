"""Session-scoped admin notices.

Mutations queue a notice before redirecting; the next rendered view flushes
the queue, delivering each notice at most once. A notice that is never
rendered before the entry expires is lost.
"""

from typing import Any, Dict, List

from rolemanager.core.cache import TransientStore

NOTICE_SUCCESS = "success"
NOTICE_ERROR = "error"
NOTICE_WARNING = "warning"
NOTICE_INFO = "info"

NOTICE_TYPES = frozenset({NOTICE_SUCCESS, NOTICE_ERROR, NOTICE_WARNING, NOTICE_INFO})

# Unread notices are dropped after a day
NOTICE_TTL = 86400


class NoticeQueue:
    """Pending notices for one admin session."""

    def __init__(self, store: TransientStore, session_key: str, *, prefix: str = "rolemanager"):
        self.store = store
        self.key = f"{prefix}:notices:{session_key}"

    def push(self, message: str, notice_type: str = NOTICE_SUCCESS) -> None:
        if notice_type not in NOTICE_TYPES:
            raise ValueError(f"Unknown notice type: {notice_type}")
        notices = self.peek()
        notices.append({"message": message, "type": notice_type})
        self.store.set(self.key, notices, NOTICE_TTL)

    def peek(self) -> List[Dict[str, Any]]:
        """Return pending notices without clearing them."""
        return list(self.store.get(self.key) or [])

    def flush(self) -> List[Dict[str, Any]]:
        """Return pending notices and clear the queue."""
        notices = self.peek()
        if notices:
            self.store.delete(self.key)
        return notices
