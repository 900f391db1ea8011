"""
Live Gold Price Monitoring for GoldWatch.

This package provides:
- Public currency API polling with mirror fallback
- Rolling in-memory price history
- Threshold alerts with a cooldown
- Telegram notifications for alert delivery
- Gemini market commentary on demand
"""

from .symbol_resolver import FeedSymbol
from .price_feed import GoldPriceFeed, GoldQuote, PriceFeedError
from .price_history import PriceHistory, PricePoint
from .alert_guard import AlertGuard, AlertDecision
from .telegram_bot import TelegramBot
from .insight import MarketInsight, MarketInsightClient, Sentiment
from .notification_log import NotificationLog, NotificationEntry
from .monitor import GoldMonitor

__all__ = [
    "FeedSymbol",
    "GoldPriceFeed",
    "GoldQuote",
    "PriceFeedError",
    "PriceHistory",
    "PricePoint",
    "AlertGuard",
    "AlertDecision",
    "TelegramBot",
    "MarketInsight",
    "MarketInsightClient",
    "Sentiment",
    "NotificationLog",
    "NotificationEntry",
    "GoldMonitor",
]
