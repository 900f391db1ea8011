#!/usr/bin/env python3
"""
Rolling Price History for the trend chart.

Keeps the most recent N price points in memory. Older points are
evicted as new ones arrive; nothing is persisted across restarts.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

import numpy as np
import pandas as pd

from ..config import HISTORY_MAX_POINTS
from ..utils.time_utils import ensure_utc, time_label, to_iso

logger = logging.getLogger("PriceHistory")


@dataclass
class PricePoint:
    """One point on the trend chart."""
    time: str
    price: int
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "price": self.price,
            "timestamp": to_iso(self.timestamp),
        }


class PriceHistory:
    """
    Bounded in-memory price history.

    Args:
        max_points: Maximum number of points to keep (default 30)
    """

    def __init__(self, max_points: int = HISTORY_MAX_POINTS):
        if max_points < 1:
            raise ValueError(f"max_points must be positive, got {max_points}")

        self.max_points = max_points
        self._points: Deque[PricePoint] = deque(maxlen=max_points)

        logger.info(f"PriceHistory initialized: max_points={max_points}")

    def append(self, price: int, timestamp: datetime) -> PricePoint:
        """
        Add a price observation.

        Args:
            price: Price per gram
            timestamp: Observation time

        Returns:
            The stored PricePoint
        """
        timestamp = ensure_utc(timestamp)
        point = PricePoint(time=time_label(timestamp), price=int(price), timestamp=timestamp)
        self._points.append(point)
        return point

    def append_quote(self, quote) -> PricePoint:
        """Add a GoldQuote from the price feed."""
        return self.append(quote.price_per_gram, quote.timestamp)

    def points(self) -> List[PricePoint]:
        """Points oldest first."""
        return list(self._points)

    def prices(self) -> List[int]:
        return [p.price for p in self._points]

    def latest(self) -> Optional[PricePoint]:
        """Get the most recent point."""
        if self._points:
            return self._points[-1]
        return None

    def is_empty(self) -> bool:
        return not self._points

    def is_full(self) -> bool:
        return len(self._points) == self.max_points

    def clear(self):
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def to_list(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._points]

    def to_dataframe(self) -> pd.DataFrame:
        """
        History as a DataFrame indexed by UTC timestamp.

        Returns:
            DataFrame with 'time' and 'price' columns (empty if no points)
        """
        if not self._points:
            return pd.DataFrame(
                columns=["time", "price"],
                index=pd.DatetimeIndex([], tz="UTC", name="timestamp"),
            )

        df = pd.DataFrame(
            {
                "time": [p.time for p in self._points],
                "price": [p.price for p in self._points],
            },
            index=pd.DatetimeIndex([p.timestamp for p in self._points], name="timestamp"),
        )
        return df

    def get_stats(self) -> Dict[str, Any]:
        """
        Summary statistics for the dashboard.

        Change is measured against the oldest point in the window.
        Volatility is the standard deviation of point-to-point returns
        and needs at least 3 points.
        """
        if not self._points:
            return {
                "count": 0,
                "latest": None,
                "min": None,
                "max": None,
                "change": None,
                "change_pct": None,
                "volatility": None,
            }

        prices = np.array(self.prices(), dtype=float)
        first, last = prices[0], prices[-1]

        change = last - first
        change_pct = change / first if first else 0.0

        volatility = 0.0
        if len(prices) >= 3:
            returns = np.diff(prices) / prices[:-1]
            volatility = float(np.std(returns, ddof=1))

        return {
            "count": len(prices),
            "latest": int(last),
            "min": int(prices.min()),
            "max": int(prices.max()),
            "change": int(change),
            "change_pct": float(change_pct),
            "volatility": volatility,
        }
