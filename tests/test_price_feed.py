"""Tests for the currency API price feed."""

from unittest.mock import Mock

import pytest
import requests

from goldwatch.live.price_feed import GoldPriceFeed, PriceFeedError, ounce_to_gram
from goldwatch.live.symbol_resolver import FeedSymbol

# 1,000,000 IDR per gram expressed per troy ounce
RATE_PER_OUNCE = 31_103_476.8


def _response(payload=None, status_ok=True):
    resp = Mock()
    if status_ok:
        resp.raise_for_status.return_value = None
    else:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError("503 Server Error")
    resp.json.return_value = payload
    return resp


def _feed(*responses):
    session = Mock()
    session.get.side_effect = list(responses)
    return GoldPriceFeed(symbol=FeedSymbol("XAU", "IDR"), session=session), session


class TestFeedSymbol:

    def test_urls_use_lowercase_base(self):
        symbol = FeedSymbol("XAU", "IDR")
        assert symbol.primary_url().endswith("/v1/currencies/xau.json")
        assert "jsdelivr" in symbol.primary_url()
        assert symbol.urls() == [symbol.primary_url(), symbol.fallback_url()]

    def test_labels(self):
        symbol = FeedSymbol("xau", "idr")
        assert symbol.display_name() == "XAU/IDR"
        assert symbol.source_label() == "Global Market (XAU/IDR)"
        assert symbol.unit_label() == "IDR/g"
        assert str(symbol) == "XAU/IDR"


class TestConversion:

    def test_ounce_to_gram_rounds_to_integer(self):
        assert ounce_to_gram(RATE_PER_OUNCE) == 1_000_000
        assert isinstance(ounce_to_gram(100.0), int)
        assert ounce_to_gram(100.0) == 3


class TestFetchPrice:

    def test_primary_mirror(self):
        feed, session = _feed(_response({"date": "2025-01-06", "xau": {"idr": RATE_PER_OUNCE}}))

        quote = feed.fetch_price()

        assert quote.price_per_gram == 1_000_000
        assert quote.price_per_ounce == pytest.approx(RATE_PER_OUNCE)
        assert quote.source == "Global Market (XAU/IDR)"
        assert quote.timestamp.tzinfo is not None
        assert session.get.call_count == 1
        url = session.get.call_args[0][0]
        assert url == feed.symbol.primary_url()
        assert session.get.call_args[1]["timeout"] == feed.timeout

    def test_falls_back_on_network_error(self):
        feed, session = _feed(
            requests.exceptions.ConnectionError("down"),
            _response({"xau": {"idr": RATE_PER_OUNCE}}),
        )

        quote = feed.fetch_price()

        assert quote.price_per_gram == 1_000_000
        assert session.get.call_count == 2
        assert session.get.call_args_list[1][0][0] == feed.symbol.fallback_url()

    def test_falls_back_on_http_error(self):
        feed, session = _feed(
            _response(status_ok=False),
            _response({"xau": {"idr": RATE_PER_OUNCE}}),
        )
        assert feed.fetch_price().price_per_gram == 1_000_000

    def test_falls_back_on_malformed_payload(self):
        feed, session = _feed(
            _response({"xau": {"usd": 2650.0}}),
            _response({"xau": {"idr": RATE_PER_OUNCE}}),
        )
        assert feed.fetch_price().price_per_gram == 1_000_000
        assert session.get.call_count == 2

    def test_all_mirrors_fail(self):
        feed, _ = _feed(
            requests.exceptions.Timeout("slow"),
            _response({"unexpected": True}),
        )
        with pytest.raises(PriceFeedError, match="XAU/IDR"):
            feed.fetch_price()


class TestParseRate:

    @pytest.fixture
    def feed(self):
        return GoldPriceFeed(symbol=FeedSymbol("xau", "idr"), session=Mock())

    def test_valid(self, feed):
        assert feed.parse_rate({"xau": {"idr": 5}}) == 5.0

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {"xau": None},
        {"xau": {"idr": "51000000"}},
        {"xau": {"idr": True}},
        {"xau": {"idr": 0}},
        {"xau": {"idr": -1.5}},
        {"xau": {"idr": float("nan")}},
    ])
    def test_rejects_bad_payloads(self, feed, payload):
        with pytest.raises(ValueError):
            feed.parse_rate(payload)
