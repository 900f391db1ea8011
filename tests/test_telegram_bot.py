"""Tests for Telegram alert delivery."""

from unittest.mock import Mock, patch

import requests

from goldwatch.live.telegram_bot import TelegramBot
from goldwatch.settings import TelegramConfig

POST = "goldwatch.live.telegram_bot.requests.post"


def _ok_response(body=None):
    resp = Mock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = {"ok": True} if body is None else body
    return resp


class TestConfiguration:

    def test_missing_credentials_disable_bot(self):
        assert not TelegramBot(token="", chat_id="1").enabled
        assert not TelegramBot(token="abc", chat_id="").enabled

    def test_disabled_bot_makes_no_request(self):
        bot = TelegramBot(token="abc", chat_id="1", enabled=False)
        with patch(POST) as mock_post:
            assert bot.send_price_alert(3_000_000, 2_900_000) is False
            assert bot.send_alert("t", "m") is False
            mock_post.assert_not_called()

    def test_from_config(self):
        config = TelegramConfig(bot_token="abc", chat_id="42", enabled=True)
        bot = TelegramBot.from_config(config)
        assert bot.enabled
        assert bot.chat_id == "42"


class TestPriceAlert:

    def test_message_format(self):
        bot = TelegramBot(token="abc", chat_id="1")
        text = bot.format_price_alert(2_950_000, 2_900_000)

        assert "GOLD PRICE ALERT" in text
        assert "IDR 2.950.000" in text
        assert "IDR 2.900.000" in text
        assert "exceeded your target threshold" in text

    def test_sends_payload(self):
        bot = TelegramBot(token="123:abc", chat_id="987")
        with patch(POST, return_value=_ok_response()) as mock_post:
            assert bot.send_price_alert(2_950_000, 2_900_000) is True

        url = mock_post.call_args[0][0]
        payload = mock_post.call_args[1]["json"]
        assert url == "https://api.telegram.org/bot123:abc/sendMessage"
        assert payload["chat_id"] == "987"
        assert payload["parse_mode"] == "HTML"
        assert "IDR 2.950.000" in payload["text"]
        assert mock_post.call_args[1]["timeout"] == bot.timeout

    def test_api_error_returns_false(self):
        bot = TelegramBot(token="abc", chat_id="1")
        body = {"ok": False, "description": "Bad Request: chat not found"}
        with patch(POST, return_value=_ok_response(body)):
            assert bot.send_price_alert(2_950_000, 2_900_000) is False

    def test_http_error_returns_false(self):
        bot = TelegramBot(token="abc", chat_id="1")
        resp = Mock()
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError("401 Unauthorized")
        with patch(POST, return_value=resp):
            assert bot.send_price_alert(2_950_000, 2_900_000) is False

    def test_network_error_returns_false(self):
        bot = TelegramBot(token="abc", chat_id="1")
        with patch(POST, side_effect=requests.exceptions.ConnectionError("offline")):
            assert bot.send_price_alert(2_950_000, 2_900_000) is False


def test_generic_alert_escapes_html():
    bot = TelegramBot(token="abc", chat_id="1")
    with patch(POST, return_value=_ok_response()) as mock_post:
        assert bot.send_alert("<Title>", "a & b")

    text = mock_post.call_args[1]["json"]["text"]
    assert "&lt;Title&gt;" in text
    assert "a &amp; b" in text


def test_connection_test_message():
    bot = TelegramBot(token="abc", chat_id="1")
    with patch(POST, return_value=_ok_response()) as mock_post:
        assert bot.test_connection()
    assert "Connection Test" in mock_post.call_args[1]["json"]["text"]
