#!/usr/bin/env python3
"""
AI Market Insight via Google Gemini.

Asks Gemini for a short read on the current gold price: a sentiment
label, a few sentences of analysis and a simple recommendation.
Any failure falls back to a neutral placeholder so the dashboard
always has something to show.
"""

import json
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

from google import genai

from ..config import (
    FALLBACK_INSIGHT,
    GEMINI_MODEL,
    GEMINI_TEMPERATURE,
)
from ..utils.formatting import format_price

logger = logging.getLogger("MarketInsight")

INSIGHT_FIELDS = ("sentiment", "analysis", "recommendation")

# Structured output contract: Gemini must return exactly these string fields
INSIGHT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {field: {"type": "STRING"} for field in INSIGHT_FIELDS},
    "required": list(INSIGHT_FIELDS),
}


class Sentiment(str, Enum):
    """Market sentiment labels."""
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"

    @classmethod
    def parse(cls, value: Any) -> "Sentiment":
        """Case-insensitive parse; anything unknown is NEUTRAL."""
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.NEUTRAL


@dataclass
class MarketInsight:
    """AI commentary on the current price."""
    sentiment: Sentiment
    analysis: str
    recommendation: str
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sentiment"] = self.sentiment.value
        return data

    @classmethod
    def fallback_insight(cls) -> "MarketInsight":
        return cls(
            sentiment=Sentiment.parse(FALLBACK_INSIGHT["sentiment"]),
            analysis=FALLBACK_INSIGHT["analysis"],
            recommendation=FALLBACK_INSIGHT["recommendation"],
            fallback=True,
        )


def build_prompt(current_price: float, currency: str = "IDR") -> str:
    """Prompt asking for sentiment, analysis and recommendation as JSON."""
    return (
        f"Analyze current gold price of {format_price(current_price, currency)} per gram.\n"
        "Provide a market sentiment (Bullish, Bearish, or Neutral), a short analysis of "
        "factors that might influence gold prices today,\n"
        "and a simple recommendation for an investor. Return the response in JSON format "
        'with the keys "sentiment", "analysis" and "recommendation".'
    )


def strip_code_fences(text: str) -> str:
    """Remove ```json ... ``` wrapping that Gemini sometimes adds."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    return cleaned


def parse_insight(text: str) -> MarketInsight:
    """
    Parse a Gemini JSON reply.

    Raises:
        ValueError: if the reply is not a JSON object with the expected keys
    """
    data = json.loads(strip_code_fences(text))
    if not isinstance(data, dict):
        raise ValueError("Insight response is not a JSON object")

    missing = [k for k in INSIGHT_FIELDS if not data.get(k)]
    if missing:
        raise ValueError(f"Insight response missing keys: {missing}")

    return MarketInsight(
        sentiment=Sentiment.parse(data["sentiment"]),
        analysis=str(data["analysis"]).strip(),
        recommendation=str(data["recommendation"]).strip(),
    )


class MarketInsightClient:
    """
    Gemini-backed market commentary.

    Args:
        api_key: Gemini API key (client is disabled when empty)
        model: Gemini model name
        currency: Quote currency code used in the prompt
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = GEMINI_MODEL,
        currency: str = "IDR",
        temperature: float = GEMINI_TEMPERATURE,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.currency = currency
        self.temperature = temperature

        if not self.api_key:
            logger.warning("Gemini API key missing - AI insight disabled")
        else:
            logger.info(f"MarketInsightClient initialized: model={model}")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def get_market_insight(self, current_price: float) -> MarketInsight:
        """
        Request commentary for the current price.

        Args:
            current_price: Price per gram (must be positive)

        Returns:
            MarketInsight (fallback insight on any API failure)

        Raises:
            ValueError: if no price is available yet
        """
        if current_price is None or current_price <= 0:
            raise ValueError("Cannot request insight without a live price")

        if not self.enabled:
            return MarketInsight.fallback_insight()

        prompt = build_prompt(current_price, self.currency)

        try:
            client = genai.Client(api_key=self.api_key)
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config={
                    "temperature": self.temperature,
                    "response_mime_type": "application/json",
                    "response_schema": INSIGHT_RESPONSE_SCHEMA,
                },
            )
            text = response.text or ""
            insight = parse_insight(text)
        except Exception as e:
            logger.error(f"Gemini error: {e}")
            return MarketInsight.fallback_insight()

        logger.info(f"Insight received: sentiment={insight.sentiment.value}")
        return insight
