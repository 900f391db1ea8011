#!/usr/bin/env python3
"""
GoldWatch Runner.

Main entry point that:
1. Loads configuration from .env and the environment
2. Builds the price feed, settings store, Telegram and Gemini clients
3. Starts the monitoring loop
4. Serves the browser dashboard (unless --headless)

Usage:
    goldwatch --start
    goldwatch --headless --start --interval 120

Environment Variables (loaded from .env):
    TELEGRAM_BOT_TOKEN  - Telegram bot token (seeds settings on first run)
    TELEGRAM_CHAT_ID    - Telegram chat/channel ID (seeds settings on first run)
    GEMINI_API_KEY      - Gemini API key (API_KEY also accepted)
    GEMINI_MODEL        - Gemini model name (default: gemini-2.5-flash)
    GOLD_THRESHOLD      - Initial alert threshold per gram
    QUOTE_CURRENCY      - Quote currency (default: idr)
    POLL_INTERVAL_S     - Seconds between polls (default: 60)
    GOLDWATCH_SETTINGS  - Settings file path (default: ~/.goldwatch/settings.json)
"""

import argparse
import atexit
import fcntl
import logging
import os
import signal
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from ..config import (
    BASE_CURRENCY,
    DASHBOARD_HOST,
    DASHBOARD_PORT,
    GEMINI_MODEL,
    LOCK_FILE,
    PID_FILE,
    POLL_INTERVAL_S,
    QUOTE_CURRENCY,
    SETTINGS_PATH,
)
from ..dashboard.app import create_app
from ..settings import SettingsStore
from .insight import MarketInsightClient
from .monitor import GoldMonitor
from .price_feed import GoldPriceFeed
from .symbol_resolver import FeedSymbol

logger = logging.getLogger("GoldWatch")

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# Global lock file handle
_lock_file_handle = None


def setup_logging(debug: bool = False, log_file: Optional[str] = "goldwatch.log"):
    """Configure root logging: console plus an optional log file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )
    # Flask/werkzeug request lines are noise at INFO
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def load_env_files():
    """Load the first .env found: working directory, then ~/.goldwatch, then home."""
    env_paths = [
        Path.cwd() / ".env",
        LOCK_FILE.parent / ".env",
        Path.home() / ".env",
    ]

    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment from {env_path}")
            return env_path

    load_dotenv()
    return None


def acquire_singleton_lock(lock_file: Path = LOCK_FILE, pid_file: Path = PID_FILE) -> bool:
    """
    Acquire a singleton lock to prevent multiple instances.

    Returns:
        True if lock acquired, False if another instance is running.
    """
    global _lock_file_handle

    lock_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        _lock_file_handle = open(lock_file, 'w')
        fcntl.flock(_lock_file_handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        if _lock_file_handle:
            _lock_file_handle.close()
            _lock_file_handle = None
        try:
            existing_pid = pid_file.read_text().strip()
            logger.error(f"Another instance is already running (PID: {existing_pid})")
        except OSError:
            logger.error("Another instance is already running")
        return False

    pid_file.write_text(str(os.getpid()))
    logger.info(f"Singleton lock acquired (PID: {os.getpid()})")
    return True


def release_singleton_lock(lock_file: Path = LOCK_FILE, pid_file: Path = PID_FILE):
    """Release the singleton lock."""
    global _lock_file_handle

    if _lock_file_handle is None:
        return

    try:
        fcntl.flock(_lock_file_handle.fileno(), fcntl.LOCK_UN)
        _lock_file_handle.close()
    except OSError as e:
        logger.warning(f"Could not release lock cleanly: {e}")
    _lock_file_handle = None

    for f in [lock_file, pid_file]:
        try:
            f.unlink()
        except FileNotFoundError:
            pass

    logger.info("Singleton lock released")


def load_config() -> Dict:
    """
    Load configuration from environment variables.

    Nothing is required: Telegram and Gemini are disabled when their
    credentials are missing.
    """
    gemini_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY", "")

    if not gemini_key:
        logger.warning("GEMINI_API_KEY not set - AI insight will use the fallback message")

    interval_raw = os.environ.get("POLL_INTERVAL_S", str(POLL_INTERVAL_S))
    try:
        poll_interval_s = float(interval_raw)
    except ValueError:
        logger.error(f"Invalid POLL_INTERVAL_S: '{interval_raw}'. Defaulting to {POLL_INTERVAL_S}")
        poll_interval_s = POLL_INTERVAL_S

    config = {
        "gemini_api_key": gemini_key,
        "gemini_model": os.environ.get("GEMINI_MODEL", GEMINI_MODEL),
        "base_currency": os.environ.get("BASE_CURRENCY", BASE_CURRENCY),
        "quote_currency": os.environ.get("QUOTE_CURRENCY", QUOTE_CURRENCY),
        "poll_interval_s": poll_interval_s,
        "settings_path": os.environ.get("GOLDWATCH_SETTINGS", str(SETTINGS_PATH)),
    }

    return config


def build_monitor(config: Dict) -> GoldMonitor:
    """Wire up feed, settings store, insight client and monitor."""
    symbol = FeedSymbol(base=config["base_currency"], quote=config["quote_currency"])
    feed = GoldPriceFeed(symbol=symbol)
    store = SettingsStore(path=config["settings_path"])
    insight_client = MarketInsightClient(
        api_key=config["gemini_api_key"],
        model=config["gemini_model"],
        currency=symbol.currency_code(),
    )

    return GoldMonitor(
        feed=feed,
        store=store,
        insight_client=insight_client,
        poll_interval_s=config["poll_interval_s"],
    )


def run_headless(monitor: GoldMonitor):
    """Block until interrupted while the monitor polls in the background."""
    try:
        while monitor.is_monitoring:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        monitor.stop()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="GoldWatch - gold price monitor with Telegram alerts",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=DASHBOARD_HOST,
        help="Dashboard bind address"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=DASHBOARD_PORT,
        help="Dashboard port"
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between price polls (default: POLL_INTERVAL_S or 60)"
    )

    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Set and persist the alert threshold before starting"
    )

    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Settings file path (default: GOLDWATCH_SETTINGS or ~/.goldwatch/settings.json)"
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the monitoring loop without the web dashboard (implies --start)"
    )

    parser.add_argument(
        "--start",
        action="store_true",
        help="Start monitoring immediately"
    )

    parser.add_argument(
        "--no-lock",
        action="store_true",
        help="Skip the single-instance lock"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    load_env_files()

    config = load_config()
    if args.interval is not None:
        config["poll_interval_s"] = args.interval
    if args.settings:
        config["settings_path"] = args.settings

    if config["poll_interval_s"] <= 0:
        logger.error(f"Poll interval must be positive, got {config['poll_interval_s']}")
        sys.exit(1)

    # Acquire singleton lock - prevent multiple instances
    if not args.no_lock:
        if not acquire_singleton_lock():
            logger.error("Cannot start: another instance is already running")
            logger.error(f"Stop the existing process or delete {LOCK_FILE}")
            sys.exit(1)
        atexit.register(release_singleton_lock)

    monitor = build_monitor(config)

    if args.threshold is not None:
        try:
            monitor.set_threshold(args.threshold)
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)

    # Setup graceful shutdown
    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        monitor.stop()
        release_singleton_lock()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if args.start or args.headless:
        monitor.start()

    try:
        if args.headless:
            run_headless(monitor)
        else:
            app = create_app(monitor)
            logger.info(f"Dashboard: http://{args.host}:{args.port}/")
            app.run(host=args.host, port=args.port, debug=False, use_reloader=False, threaded=True)
    finally:
        monitor.stop()
        monitor.feed.close()
        release_singleton_lock()


if __name__ == "__main__":
    main()
