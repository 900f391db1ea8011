#!/usr/bin/env python3
"""
Live Gold Price Feed.

Fetches the XAU rate from the public currency API and converts the
troy-ounce quote into a price per gram.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from ..config import DEFAULT_REQUEST_TIMEOUT, TROY_OUNCE_TO_GRAM
from ..utils.time_utils import to_iso, utc_now
from .symbol_resolver import FeedSymbol

logger = logging.getLogger("PriceFeed")


class PriceFeedError(Exception):
    """Raised when no feed mirror returned a usable price."""


@dataclass
class GoldQuote:
    """A single gold price observation."""
    price_per_gram: int
    price_per_ounce: float
    timestamp: datetime
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price_per_gram": self.price_per_gram,
            "price_per_ounce": self.price_per_ounce,
            "timestamp": to_iso(self.timestamp),
            "source": self.source,
        }


def ounce_to_gram(price_per_ounce: float) -> int:
    """Convert a troy-ounce price to a whole-unit price per gram."""
    return int(round(price_per_ounce / TROY_OUNCE_TO_GRAM))


class GoldPriceFeed:
    """
    Fetch the current gold price from the currency API.

    Tries each mirror in turn; the first valid payload wins.

    Args:
        symbol: FeedSymbol with base/quote currencies
        timeout: Request timeout in seconds
        session: Optional requests.Session (a new one is created otherwise)
    """

    def __init__(
        self,
        symbol: Optional[FeedSymbol] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.symbol = symbol or FeedSymbol()
        self.timeout = timeout
        self.session = session or requests.Session()

        logger.info(f"GoldPriceFeed initialized: {self.symbol.display_name()}")

    def fetch_price(self) -> GoldQuote:
        """
        Fetch the latest price.

        Returns:
            GoldQuote with price per gram

        Raises:
            PriceFeedError: if every mirror failed
        """
        errors = []

        for url in self.symbol.urls():
            try:
                rate = self._fetch_rate(url)
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"Price feed mirror failed ({url}): {e}")
                errors.append(str(e))
                continue

            quote = GoldQuote(
                price_per_gram=ounce_to_gram(rate),
                price_per_ounce=rate,
                timestamp=utc_now(),
                source=self.symbol.source_label(),
            )
            logger.debug(
                f"Fetched {self.symbol.display_name()}: "
                f"{rate:.2f}/oz -> {quote.price_per_gram}/g"
            )
            return quote

        raise PriceFeedError(
            f"All price feed mirrors failed for {self.symbol.display_name()}: "
            + "; ".join(errors)
        )

    def _fetch_rate(self, url: str) -> float:
        """Fetch one mirror and extract the base->quote rate."""
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return self.parse_rate(response.json())

    def parse_rate(self, data: Any) -> float:
        """
        Extract the troy-ounce rate from a feed payload.

        Raises:
            ValueError: if the payload does not hold a positive number
        """
        if not isinstance(data, dict):
            raise ValueError("Feed payload is not a JSON object")

        rates = data.get(self.symbol.base)
        if not isinstance(rates, dict):
            raise ValueError(f"Feed payload has no '{self.symbol.base}' rates")

        rate = rates.get(self.symbol.quote)
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise ValueError(f"Feed payload has no numeric '{self.symbol.quote}' rate")
        if not math.isfinite(rate) or rate <= 0:
            raise ValueError(f"Feed returned non-positive rate: {rate}")

        return float(rate)

    def close(self):
        """Close the underlying HTTP session."""
        self.session.close()
