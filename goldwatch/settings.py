"""
Persistent user settings for GoldWatch.

Telegram credentials and the alert threshold are stored as a small JSON
file so they survive restarts. Environment variables seed the defaults
on first run.
"""

import json
import logging
import math
import os
import tempfile
import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import DEFAULT_THRESHOLD, SETTINGS_PATH

logger = logging.getLogger("Settings")


@dataclass
class TelegramConfig:
    """Telegram bot credentials."""
    bot_token: str = ""
    chat_id: str = ""
    enabled: bool = False

    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def masked(self) -> Dict[str, Any]:
        """Config safe to display: only the last 4 token characters are shown."""
        token = self.bot_token
        if len(token) > 4:
            token = "*" * (len(token) - 4) + token[-4:]
        elif token:
            token = "*" * len(token)
        return {
            "bot_token": token,
            "chat_id": self.chat_id,
            "enabled": self.enabled,
            "configured": self.is_configured(),
        }


@dataclass
class Settings:
    """All persisted settings."""
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    threshold: float = DEFAULT_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: Optional["Settings"] = None) -> "Settings":
        """Build settings from a dict, filling gaps from defaults."""
        base = defaults or cls()
        tg = data.get("telegram") or {}

        telegram = TelegramConfig(
            bot_token=str(tg.get("bot_token", base.telegram.bot_token) or ""),
            chat_id=str(tg.get("chat_id", base.telegram.chat_id) or ""),
            enabled=bool(tg.get("enabled", base.telegram.enabled)),
        )
        threshold = data.get("threshold", base.threshold)
        try:
            threshold = validate_threshold(threshold)
        except ValueError:
            logger.warning(f"Ignoring invalid stored threshold: {threshold!r}")
            threshold = base.threshold

        return cls(telegram=telegram, threshold=threshold)


def validate_threshold(value: Any) -> float:
    """
    Parse a threshold value.

    Raises:
        ValueError: if the value is not a non-negative number
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid threshold: {value!r}")
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid threshold: {value!r}")
    if not math.isfinite(threshold) or threshold < 0:
        raise ValueError(f"Threshold must be a non-negative number, got {value!r}")
    return threshold


def settings_from_env() -> Settings:
    """Default settings seeded from environment variables."""
    token = os.environ.get("TELEGRAM_BOT_TOKEN", "")
    chat_id = os.environ.get("TELEGRAM_CHAT_ID", "")

    threshold = DEFAULT_THRESHOLD
    raw_threshold = os.environ.get("GOLD_THRESHOLD")
    if raw_threshold:
        try:
            threshold = validate_threshold(raw_threshold)
        except ValueError:
            logger.warning(f"Ignoring invalid GOLD_THRESHOLD: {raw_threshold!r}")

    return Settings(
        telegram=TelegramConfig(
            bot_token=token,
            chat_id=chat_id,
            enabled=bool(token and chat_id),
        ),
        threshold=threshold,
    )


class SettingsStore:
    """
    JSON-file settings store.

    Args:
        path: Settings file location (default ~/.goldwatch/settings.json)
        defaults: Settings used when the file is missing
    """

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        defaults: Optional[Settings] = None,
    ):
        self.path = Path(path) if path else SETTINGS_PATH
        self.defaults = defaults or settings_from_env()
        self._lock = threading.Lock()
        self._settings = self.load()

        logger.info(f"SettingsStore initialized: {self.path}")

    def load(self) -> Settings:
        """Read settings from disk, falling back to defaults."""
        if not self.path.exists():
            logger.info("No settings file yet - using defaults")
            return Settings.from_dict({}, self.defaults)

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read settings file {self.path}: {e}")
            return Settings.from_dict({}, self.defaults)

        if not isinstance(data, dict):
            logger.error(f"Settings file {self.path} is not a JSON object")
            return Settings.from_dict({}, self.defaults)

        return Settings.from_dict(data, self.defaults)

    def save(self, settings: Optional[Settings] = None):
        """Write settings atomically (temp file + rename)."""
        with self._lock:
            if settings is not None:
                self._settings = settings
            data = self._settings.to_dict()

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=".settings-", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_path, self.path)
            except OSError:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise

        logger.debug(f"Settings saved to {self.path}")

    @property
    def settings(self) -> Settings:
        with self._lock:
            return self._settings

    @property
    def telegram(self) -> TelegramConfig:
        return self.settings.telegram

    @property
    def threshold(self) -> float:
        return self.settings.threshold

    def update_threshold(self, value: Any) -> float:
        """
        Validate, store and persist a new threshold.

        Raises:
            ValueError: if the value is invalid
        """
        threshold = validate_threshold(value)
        with self._lock:
            self._settings = Settings(telegram=self._settings.telegram, threshold=threshold)
        self.save()
        logger.info(f"Threshold updated: {threshold:,.0f}")
        return threshold

    def update_telegram(
        self,
        bot_token: Optional[str] = None,
        chat_id: Optional[str] = None,
        enabled: Optional[bool] = None,
    ) -> TelegramConfig:
        """Update any subset of the Telegram settings and persist them."""
        with self._lock:
            current = self._settings.telegram
            telegram = TelegramConfig(
                bot_token=current.bot_token if bot_token is None else bot_token.strip(),
                chat_id=current.chat_id if chat_id is None else str(chat_id).strip(),
                enabled=current.enabled if enabled is None else bool(enabled),
            )
            self._settings = Settings(telegram=telegram, threshold=self._settings.threshold)
        self.save()
        logger.info(
            f"Telegram settings updated: configured={telegram.is_configured()}, "
            f"enabled={telegram.enabled}"
        )
        return telegram
