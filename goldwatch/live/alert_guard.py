#!/usr/bin/env python3
"""
Alert Guard for threshold notifications.

Implements:
- Threshold check (price at or above the target)
- Cooldown between alerts (default 10 minutes)

The cooldown only starts after a successful send, so a failed
delivery is retried on the next poll.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from ..config import ALERT_COOLDOWN_S
from ..utils.time_utils import to_iso, utc_now

logger = logging.getLogger("AlertGuard")


@dataclass
class AlertDecision:
    """Decision from alert guard check."""
    allow: bool
    reason: str
    remaining_s: int = 0


class AlertGuard:
    """
    Debounced threshold alerting.

    Args:
        cooldown_s: Minimum seconds between successful alerts (default 600)
    """

    def __init__(self, cooldown_s: int = ALERT_COOLDOWN_S):
        self.cooldown_s = cooldown_s

        # State
        self._last_alert_ts: Optional[datetime] = None
        self._alerts_sent = 0

        logger.info(f"AlertGuard initialized: cooldown={cooldown_s}s")

    def check(
        self,
        price: float,
        threshold: float,
        timestamp: Optional[datetime] = None,
    ) -> AlertDecision:
        """
        Check whether an alert should be sent for this price.

        Args:
            price: Current price per gram
            threshold: Alert threshold
            timestamp: Check time (default now)

        Returns:
            AlertDecision with allow flag, reason and remaining cooldown
        """
        if timestamp is None:
            timestamp = utc_now()

        if price is None or price <= 0:
            return AlertDecision(allow=False, reason="No price yet")

        if threshold <= 0:
            return AlertDecision(allow=False, reason="Threshold not set")

        if price < threshold:
            return AlertDecision(allow=False, reason="Price below threshold")

        if self._last_alert_ts is not None:
            elapsed = (timestamp - self._last_alert_ts).total_seconds()
            if elapsed <= self.cooldown_s:
                remaining = int(self.cooldown_s - elapsed)
                return AlertDecision(
                    allow=False,
                    reason=f"Cooldown: {remaining}s remaining",
                    remaining_s=remaining,
                )

        return AlertDecision(allow=True, reason="Threshold reached")

    def record_success(self, timestamp: Optional[datetime] = None):
        """Start the cooldown after a delivered alert."""
        if timestamp is None:
            timestamp = utc_now()

        self._last_alert_ts = timestamp
        self._alerts_sent += 1

        logger.debug(f"Recorded alert at {timestamp}")

    def remaining_cooldown(self, timestamp: Optional[datetime] = None) -> int:
        """Seconds until another alert may be sent (0 if none pending)."""
        if self._last_alert_ts is None:
            return 0
        if timestamp is None:
            timestamp = utc_now()
        elapsed = (timestamp - self._last_alert_ts).total_seconds()
        return max(0, int(self.cooldown_s - elapsed))

    def get_status(self) -> Dict:
        """Get current guard status as dict."""
        return {
            "cooldown_s": self.cooldown_s,
            "last_alert": to_iso(self._last_alert_ts),
            "remaining_s": self.remaining_cooldown(),
            "alerts_sent": self._alerts_sent,
        }

    def reset(self):
        """Clear the cooldown."""
        self._last_alert_ts = None
        self._alerts_sent = 0
        logger.info("AlertGuard reset")
