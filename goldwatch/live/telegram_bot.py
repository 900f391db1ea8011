#!/usr/bin/env python3
"""
Telegram Bot for Price Alerts.

Sends formatted gold price alerts to a Telegram chat.
"""

import html
import logging

import requests

from ..config import DEFAULT_REQUEST_TIMEOUT, TELEGRAM_API_URL
from ..utils.formatting import format_price

logger = logging.getLogger("TelegramBot")


class TelegramBot:
    """
    Telegram notification bot for price alerts.

    Args:
        token: Telegram Bot API token
        chat_id: Target chat/channel ID
        enabled: Whether to actually send messages (default True)
        currency: Quote currency code used in messages
    """

    API_URL = TELEGRAM_API_URL

    def __init__(
        self,
        token: str,
        chat_id: str,
        enabled: bool = True,
        currency: str = "IDR",
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.token = (token or "").strip()
        self.chat_id = str(chat_id or "").strip()
        self.enabled = enabled
        self.currency = currency
        self.timeout = timeout

        if not self.token or not self.chat_id:
            if enabled:
                logger.warning("Telegram bot not fully configured")
            self.enabled = False
        elif enabled:
            logger.info(f"TelegramBot initialized for chat: {self.chat_id}")

    @classmethod
    def from_config(cls, config, currency: str = "IDR") -> "TelegramBot":
        """Build a bot from a TelegramConfig."""
        return cls(
            token=config.bot_token,
            chat_id=config.chat_id,
            enabled=config.enabled,
            currency=currency,
        )

    def format_price_alert(self, current_price: float, threshold: float) -> str:
        """Build the alert message body."""
        lines = [
            "🚨 <b>GOLD PRICE ALERT</b> 🚨",
            "",
            f"<b>Current Price:</b> {format_price(current_price, self.currency)}",
            f"<b>Threshold:</b> {format_price(threshold, self.currency)}",
            "",
            "Status: The price has exceeded your target threshold! 📈",
        ]
        return "\n".join(lines)

    def send_price_alert(self, current_price: float, threshold: float) -> bool:
        """
        Send a threshold alert to Telegram.

        Args:
            current_price: Current price per gram
            threshold: Configured threshold

        Returns:
            True if sent successfully
        """
        if not self.enabled:
            logger.warning(
                f"Telegram disabled - alert NOT sent "
                f"(token={bool(self.token)}, chat_id={bool(self.chat_id)})"
            )
            return False

        return self._send_message(self.format_price_alert(current_price, threshold))

    def send_alert(self, title: str, message: str) -> bool:
        """
        Send a generic alert message.

        Args:
            title: Alert title
            message: Alert body

        Returns:
            True if sent successfully
        """
        if not self.enabled:
            return False

        text = f"⚠️ <b>{html.escape(title)}</b>\n\n{html.escape(message)}"
        return self._send_message(text)

    def _send_message(self, text: str) -> bool:
        """Send a message via Telegram API."""
        url = self.API_URL.format(token=self.token)

        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_notification": False,
        }

        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()

            result = response.json()
            if result.get("ok"):
                logger.info("Telegram message sent successfully")
                return True
            else:
                logger.error(f"Telegram API error: {result}")
                return False

        except requests.exceptions.RequestException as e:
            # Avoid logging the token embedded in the URL
            logger.error(f"Failed to send Telegram message: {type(e).__name__}")
            return False
        except ValueError:
            logger.error("Telegram API returned a non-JSON response")
            return False

    def test_connection(self) -> bool:
        """Test Telegram connection with a simple message."""
        return self.send_alert(
            "Connection Test",
            "GoldWatch connected successfully! 🚀"
        )
