#!/usr/bin/env python3
"""
Centralized Symbol Resolver for the currency feed.

The public currency API publishes one JSON document per base currency,
keyed by lower-case codes:

    https://.../v1/currencies/xau.json  ->  {"date": "...", "xau": {"idr": 51234567.8, ...}}

Labels shown to the user use upper-case codes:
    - Display name: XAU/IDR
    - Source label: Global Market (XAU/IDR)
    - Unit label:   IDR/g
"""

from dataclasses import dataclass
from typing import List

from ..config import (
    BASE_CURRENCY,
    FEED_FALLBACK_URL,
    FEED_PRIMARY_URL,
    QUOTE_CURRENCY,
)


@dataclass
class FeedSymbol:
    """
    Symbol resolver for the currency feed.

    Args:
        base: Base currency (e.g., "xau" for gold)
        quote: Quote currency (e.g., "idr")

    Example:
        symbol = FeedSymbol("xau", "idr")
        symbol.primary_url()   # ".../currencies/xau.json"
        symbol.display_name()  # "XAU/IDR"
    """
    base: str = BASE_CURRENCY
    quote: str = QUOTE_CURRENCY

    def __post_init__(self):
        self.base = self.base.strip().lower()
        self.quote = self.quote.strip().lower()

    def primary_url(self) -> str:
        """jsDelivr mirror of the currency API."""
        return FEED_PRIMARY_URL.format(base=self.base)

    def fallback_url(self) -> str:
        """Cloudflare pages mirror of the currency API."""
        return FEED_FALLBACK_URL.format(base=self.base)

    def urls(self) -> List[str]:
        """Feed URLs in the order they should be tried."""
        return [self.primary_url(), self.fallback_url()]

    def display_name(self) -> str:
        """Human-readable pair: XAU/IDR"""
        return f"{self.base.upper()}/{self.quote.upper()}"

    def source_label(self) -> str:
        """Data source label shown next to the price."""
        return f"Global Market ({self.display_name()})"

    def unit_label(self) -> str:
        """Price unit: IDR/g"""
        return f"{self.quote.upper()}/g"

    def currency_code(self) -> str:
        """Upper-case quote currency code used in messages."""
        return self.quote.upper()

    def __str__(self) -> str:
        return self.display_name()
