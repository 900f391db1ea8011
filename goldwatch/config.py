"""
Configuration module for GoldWatch.

Defaults for the price feed, polling loop, alerting and AI insight.
Most values can be overridden with environment variables (see
live_runner.load_config) or CLI flags.
"""

from pathlib import Path

# =============================================================================
# PRICE FEED
# =============================================================================

# Grams in one troy ounce
TROY_OUNCE_TO_GRAM = 31.1034768

# Public currency API (jsDelivr mirror first, Cloudflare pages as fallback)
FEED_PRIMARY_URL = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest/v1/currencies/{base}.json"
FEED_FALLBACK_URL = "https://latest.currency-api.pages.dev/v1/currencies/{base}.json"

BASE_CURRENCY = "xau"
QUOTE_CURRENCY = "idr"

DEFAULT_REQUEST_TIMEOUT = 10

# =============================================================================
# MONITORING LOOP
# =============================================================================

POLL_INTERVAL_S = 60
HISTORY_MAX_POINTS = 30

# Log a status line every N polls
STATUS_LOG_EVERY = 10

# =============================================================================
# ALERTING
# =============================================================================

DEFAULT_THRESHOLD = 2_900_000  # IDR per gram
ALERT_COOLDOWN_S = 600
NOTIFICATION_LOG_MAX = 50

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"

# =============================================================================
# AI INSIGHT
# =============================================================================

GEMINI_MODEL = "gemini-2.5-flash"
GEMINI_TEMPERATURE = 0.4

FALLBACK_INSIGHT = {
    "sentiment": "Neutral",
    "analysis": "Could not fetch AI analysis at this time.",
    "recommendation": "Monitor global economic indicators.",
}

# =============================================================================
# PATHS
# =============================================================================

DATA_DIR = Path.home() / ".goldwatch"
SETTINGS_PATH = DATA_DIR / "settings.json"
LOCK_FILE = DATA_DIR / "goldwatch.lock"
PID_FILE = DATA_DIR / "goldwatch.pid"

# =============================================================================
# DASHBOARD
# =============================================================================

DASHBOARD_HOST = "127.0.0.1"
DASHBOARD_PORT = 8050
DASHBOARD_REFRESH_MS = 5000
