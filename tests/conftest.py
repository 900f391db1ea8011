"""Shared fixtures for GoldWatch tests. Nothing here touches the network."""

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union
from unittest.mock import Mock

import pytest

from goldwatch.live.monitor import GoldMonitor
from goldwatch.live.price_feed import GoldQuote, PriceFeedError
from goldwatch.live.symbol_resolver import FeedSymbol
from goldwatch.settings import Settings, SettingsStore, TelegramConfig

BASE_TIME = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)


def make_quote(price: int, minutes: float = 0) -> GoldQuote:
    return GoldQuote(
        price_per_gram=price,
        price_per_ounce=price * 31.1034768,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
        source="Global Market (XAU/IDR)",
    )


class FakeFeed:
    """Price feed returning queued quotes (or raising queued errors)."""

    def __init__(self, items: Optional[List[Union[GoldQuote, Exception]]] = None):
        self.symbol = FeedSymbol("xau", "idr")
        self.items = list(items or [])
        self.calls = 0
        self._lock = threading.Lock()

    def push(self, item: Union[GoldQuote, Exception]):
        with self._lock:
            self.items.append(item)

    def fetch_price(self) -> GoldQuote:
        with self._lock:
            self.calls += 1
            item = self.items.pop(0) if self.items else PriceFeedError("no data queued")

        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def telegram_config():
    return TelegramConfig(bot_token="123456:ABCDEF-token", chat_id="987654", enabled=True)


@pytest.fixture
def store(tmp_path, telegram_config):
    defaults = Settings(telegram=telegram_config, threshold=2_900_000)
    return SettingsStore(path=tmp_path / "settings.json", defaults=defaults)


@pytest.fixture
def fake_bot():
    bot = Mock()
    bot.send_price_alert.return_value = True
    bot.test_connection.return_value = True
    return bot


@pytest.fixture
def feed():
    return FakeFeed()


@pytest.fixture
def monitor(feed, store, fake_bot):
    m = GoldMonitor(
        feed=feed,
        store=store,
        poll_interval_s=3600,
        bot_factory=lambda config: fake_bot,
    )
    yield m
    m.stop()


@pytest.fixture
def running_monitor(monitor, feed):
    """
    Monitor with the loop started.

    The feed queue is empty at start, so the loop's immediate first poll
    fails and the thread goes back to sleep; tests then drive polls
    explicitly with poll_once().
    """
    assert not feed.items
    monitor.start()
    deadline = time.monotonic() + 5
    while monitor.get_status()["poll_errors"] < 1:
        assert time.monotonic() < deadline, "first poll never ran"
        time.sleep(0.01)
    return monitor
