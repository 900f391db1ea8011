#!/usr/bin/env python3
"""
Gold Price Monitor.

Orchestrates the monitoring loop:
1. Polls the price feed on a fixed interval
2. Maintains the rolling price history
3. Checks the alert threshold with cooldown
4. Sends Telegram notifications and logs every attempt
5. Requests AI insight on demand
"""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..config import POLL_INTERVAL_S, STATUS_LOG_EVERY
from ..settings import SettingsStore, TelegramConfig
from ..utils.formatting import format_pct
from ..utils.time_utils import to_iso, utc_now
from .alert_guard import AlertGuard
from .insight import MarketInsight, MarketInsightClient
from .notification_log import NotificationLog, alert_message
from .price_feed import GoldPriceFeed, GoldQuote, PriceFeedError
from .price_history import PriceHistory
from .telegram_bot import TelegramBot

logger = logging.getLogger("GoldMonitor")


class GoldMonitor:
    """
    Main orchestration class for price monitoring.

    Telegram settings and the threshold are read from the settings
    store on every check, so changes made on the dashboard apply to
    the next poll without a restart.

    Args:
        feed: GoldPriceFeed instance
        store: SettingsStore with Telegram config and threshold
        insight_client: Optional MarketInsightClient
        poll_interval_s: Seconds between polls (default 60)
        history: Optional PriceHistory (default 30 points)
        guard: Optional AlertGuard (default 10 minute cooldown)
        notification_log: Optional NotificationLog (default 50 entries)
        bot_factory: Callable building a TelegramBot from a TelegramConfig
    """

    def __init__(
        self,
        feed: GoldPriceFeed,
        store: SettingsStore,
        insight_client: Optional[MarketInsightClient] = None,
        poll_interval_s: float = POLL_INTERVAL_S,
        history: Optional[PriceHistory] = None,
        guard: Optional[AlertGuard] = None,
        notification_log: Optional[NotificationLog] = None,
        bot_factory: Optional[Callable[[TelegramConfig], TelegramBot]] = None,
    ):
        if poll_interval_s <= 0:
            raise ValueError(f"poll_interval_s must be positive, got {poll_interval_s}")

        self.feed = feed
        self.store = store
        self.insight_client = insight_client
        self.poll_interval_s = poll_interval_s
        self.history = history or PriceHistory()
        self.guard = guard or AlertGuard()
        self.notification_log = notification_log or NotificationLog()
        self.currency = feed.symbol.currency_code()
        self._bot_factory = bot_factory or (
            lambda config: TelegramBot.from_config(config, currency=self.currency)
        )

        # State
        self._lock = threading.Lock()
        self._alert_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._monitoring = False
        self._current_price: Optional[int] = None
        self._last_updated: Optional[datetime] = None
        self._source = "Initializing..."
        self._last_insight: Optional[MarketInsight] = None

        # Counters
        self._polls = 0
        self._poll_errors = 0
        self._alerts_sent = 0
        self._alerts_failed = 0

        logger.info(
            f"GoldMonitor initialized: symbol={feed.symbol.display_name()}, "
            f"interval={poll_interval_s}s"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_monitoring(self) -> bool:
        with self._lock:
            return self._monitoring

    def start(self) -> bool:
        """
        Start the polling thread. Fetches immediately, then every interval.

        Returns:
            False if monitoring was already running
        """
        with self._lock:
            if self._monitoring:
                return False
            self._monitoring = True
            # Per-run event; an older loop still mid-fetch exits on its own
            # set event and discards that fetch.
            stop_event = threading.Event()
            self._stop_event = stop_event
            thread = threading.Thread(
                target=self._run, args=(stop_event,), name="GoldMonitor", daemon=True
            )
            self._thread = thread

        logger.info("=" * 60)
        logger.info("  STARTING GOLD PRICE MONITOR")
        logger.info("=" * 60)
        logger.info(f"Symbol: {self.feed.symbol.display_name()}")
        logger.info(f"Interval: {self.poll_interval_s}s")
        logger.info(f"Threshold: {self.store.threshold:,.0f}")
        logger.info(f"Telegram: {'ENABLED' if self.store.telegram.enabled else 'DISABLED'}")
        logger.info("=" * 60)

        thread.start()
        return True

    def stop(self, timeout: float = 5.0, wait: bool = True) -> bool:
        """
        Stop the polling thread.

        Args:
            timeout: Max seconds to join the thread
            wait: Join the thread; False returns as soon as the loop is signalled

        Returns:
            False if monitoring was not running
        """
        with self._lock:
            if not self._monitoring:
                return False
            self._monitoring = False
            self._stop_event.set()
            thread = self._thread

        if wait and thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Polling thread still finishing a fetch; it will exit after it")

        logger.info(f"Monitor stopped. Polls: {self._polls}, errors: {self._poll_errors}")
        return True

    def _run(self, stop_event: threading.Event):
        """Polling loop (runs in background thread) until its own stop event is set."""
        while not stop_event.is_set():
            self.poll_once(stop_event)
            if stop_event.wait(self.poll_interval_s):
                break

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll_once(self, stop_event: Optional[threading.Event] = None) -> Optional[GoldQuote]:
        """
        Fetch one price, update history and run the alert check.

        Args:
            stop_event: Event of the calling loop; a fetch that completes
                after it is set is discarded

        Returns:
            The fetched quote, or None if the feed failed or the loop was stopped
        """
        try:
            quote = self.feed.fetch_price()
        except PriceFeedError as e:
            with self._lock:
                self._poll_errors += 1
            logger.error(f"Monitoring error: {e}")
            return None

        with self._lock:
            # stop() sets the event under this lock
            if stop_event is not None and stop_event.is_set():
                logger.debug("Discarding price fetched after stop")
                return None
            self._current_price = quote.price_per_gram
            self._last_updated = quote.timestamp
            self._source = quote.source
            self._polls += 1
            polls = self._polls
            self.history.append_quote(quote)

        if polls % STATUS_LOG_EVERY == 0 or polls == 1:
            stats = self.history.get_stats()
            logger.info(
                f"Status: polls={polls}, errors={self._poll_errors}, "
                f"price={quote.price_per_gram:,} {self.feed.symbol.unit_label()}, "
                f"change={format_pct(stats['change_pct'])} over {stats['count']} points, "
                f"alerts={self._alerts_sent}"
            )
        else:
            logger.debug(f"Price: {quote.price_per_gram:,} | Source: {quote.source}")

        self.check_alert(quote.timestamp)
        return quote

    def check_alert(self, timestamp: Optional[datetime] = None) -> bool:
        """
        Send a Telegram alert if the current price is at or above the threshold.

        Only runs while monitoring. The cooldown starts only after a
        successful send.

        Returns:
            True if an alert was delivered
        """
        if timestamp is None:
            timestamp = utc_now()

        with self._alert_lock:
            with self._lock:
                if not self._monitoring:
                    return False
                price = self._current_price

            threshold = self.store.threshold
            telegram = self.store.telegram

            decision = self.guard.check(price, threshold, timestamp)
            if not decision.allow:
                logger.debug(f"Alert blocked: {decision.reason}")
                return False

            # A disabled or unconfigured bot reports False and is logged as failed
            bot = self._bot_factory(telegram)
            success = bot.send_price_alert(price, threshold)

            self.notification_log.add(
                alert_message(threshold, price, self.currency),
                success=success,
            )

            if success:
                self.guard.record_success(timestamp)
                with self._lock:
                    self._alerts_sent += 1
                logger.info(f"🔔 ALERT SENT: {price:,} >= {threshold:,.0f}")
            else:
                with self._lock:
                    self._alerts_failed += 1
                logger.warning(f"Alert delivery failed: {price:,} >= {threshold:,.0f}")

            return success

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_threshold(self, value: Any) -> float:
        """
        Persist a new threshold and re-check the current price against it.

        Raises:
            ValueError: if the value is invalid
        """
        threshold = self.store.update_threshold(value)
        self.check_alert()
        return threshold

    def update_telegram(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        enabled: Optional[bool] = None,
    ) -> TelegramConfig:
        """Persist Telegram settings and re-check the alert condition."""
        config = self.store.update_telegram(bot_token=bot_token, chat_id=chat_id, enabled=enabled)
        self.check_alert()
        return config

    def test_telegram(self) -> bool:
        """Send a connection test message with the stored credentials."""
        bot = self._bot_factory(self.store.telegram)
        success = bot.test_connection()
        self.notification_log.add("Telegram connection test", success=success)
        return success

    # ------------------------------------------------------------------
    # Insight
    # ------------------------------------------------------------------

    def fetch_insight(self) -> MarketInsight:
        """
        Ask for AI commentary on the current price.

        Raises:
            ValueError: if no price has been fetched yet
        """
        with self._lock:
            price = self._current_price

        if not price:
            raise ValueError("Wait for live price data to analyze")

        if self.insight_client is None:
            insight = MarketInsight.fallback_insight()
        else:
            insight = self.insight_client.get_market_insight(price)

        with self._lock:
            self._last_insight = insight
        return insight

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def current_price(self) -> Optional[int]:
        with self._lock:
            return self._current_price

    def get_status(self) -> Dict[str, Any]:
        """Get current monitor status."""
        with self._lock:
            status = {
                "monitoring": self._monitoring,
                "current_price": self._current_price,
                "last_updated": to_iso(self._last_updated),
                "source": self._source,
                "symbol": self.feed.symbol.display_name(),
                "unit": self.feed.symbol.unit_label(),
                "poll_interval_s": self.poll_interval_s,
                "polls": self._polls,
                "poll_errors": self._poll_errors,
                "alerts_sent": self._alerts_sent,
                "alerts_failed": self._alerts_failed,
                "insight": self._last_insight.to_dict() if self._last_insight else None,
            }
            status["history"] = self.history.get_stats()

        status["threshold"] = self.store.threshold
        status["telegram_enabled"] = self.store.telegram.enabled
        status["insight_available"] = bool(self.insight_client and self.insight_client.enabled)
        status["alert_guard"] = self.guard.get_status()
        return status
