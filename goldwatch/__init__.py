"""
GoldWatch - Gold Price Monitor

Polls a public XAU feed, keeps a short price trend, pushes Telegram
alerts when a price threshold is crossed and asks Gemini for a quick
market read on demand.
"""

__version__ = "1.0.0"
__author__ = "GoldWatch Team"
