#!/usr/bin/env python3
"""
Notification Log.

In-memory record of alert attempts, newest first, capped in size.
"""

import logging
import threading
import uuid
from collections import deque
from dataclasses import asdict, dataclass
from typing import Deque, Dict, List

from ..config import NOTIFICATION_LOG_MAX
from ..utils.formatting import format_price
from ..utils.time_utils import log_timestamp

logger = logging.getLogger("NotificationLog")

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass
class NotificationEntry:
    """One alert attempt."""
    id: str
    timestamp: str
    message: str
    status: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def alert_message(threshold: float, price: float, currency: str = "IDR") -> str:
    """Log line for a threshold alert."""
    return (
        f"Price threshold {format_price(threshold, currency)} "
        f"triggered at {format_price(price, currency)}"
    )


class NotificationLog:
    """
    Bounded log of notification attempts.

    Args:
        max_entries: Maximum number of entries to keep (default 50)
    """

    def __init__(self, max_entries: int = NOTIFICATION_LOG_MAX):
        self.max_entries = max_entries
        # appendleft keeps newest first; maxlen drops from the right (oldest)
        self._entries: Deque[NotificationEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def add(self, message: str, success: bool) -> NotificationEntry:
        """
        Record an attempt.

        Args:
            message: Human-readable description
            success: Whether delivery succeeded

        Returns:
            The stored entry
        """
        entry = NotificationEntry(
            id=uuid.uuid4().hex[:12],
            timestamp=log_timestamp(),
            message=message,
            status=STATUS_SUCCESS if success else STATUS_FAILED,
        )
        with self._lock:
            self._entries.appendleft(entry)

        logger.debug(f"Notification logged: {entry.status} - {message}")
        return entry

    def entries(self) -> List[NotificationEntry]:
        """Entries newest first."""
        with self._lock:
            return list(self._entries)

    def to_list(self) -> List[Dict[str, str]]:
        return [e.to_dict() for e in self.entries()]

    def count_by_status(self) -> Dict[str, int]:
        counts = {STATUS_SUCCESS: 0, STATUS_FAILED: 0}
        for entry in self.entries():
            counts[entry.status] += 1
        return counts

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
