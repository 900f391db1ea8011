"""Tests for the Gemini market insight client."""

from unittest.mock import Mock, patch

import pytest

from goldwatch.live.insight import (
    MarketInsight,
    MarketInsightClient,
    Sentiment,
    build_prompt,
    parse_insight,
    strip_code_fences,
)

GENAI = "goldwatch.live.insight.genai"


def _genai_returning(text):
    genai = Mock()
    response = Mock()
    response.text = text
    genai.Client.return_value.models.generate_content.return_value = response
    return genai


class TestParsing:

    @pytest.mark.parametrize("raw,expected", [
        ("Bullish", Sentiment.BULLISH),
        ("bearish", Sentiment.BEARISH),
        (" NEUTRAL ", Sentiment.NEUTRAL),
        ("Sideways", Sentiment.NEUTRAL),
        (None, Sentiment.NEUTRAL),
    ])
    def test_sentiment_parse(self, raw, expected):
        assert Sentiment.parse(raw) is expected

    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_parse_insight(self):
        insight = parse_insight(
            '{"sentiment": "bullish", "analysis": "Weak dollar.", "recommendation": "Hold."}'
        )
        assert insight.sentiment is Sentiment.BULLISH
        assert insight.analysis == "Weak dollar."
        assert insight.recommendation == "Hold."
        assert not insight.fallback

    def test_parse_insight_missing_keys(self):
        with pytest.raises(ValueError, match="missing"):
            parse_insight('{"sentiment": "Bullish"}')

    def test_parse_insight_not_json(self):
        with pytest.raises(ValueError):
            parse_insight("The market looks fine today.")


def test_prompt_mentions_price():
    prompt = build_prompt(2_950_000)
    assert "IDR 2.950.000 per gram" in prompt
    assert "Bullish, Bearish, or Neutral" in prompt
    assert "JSON" in prompt


def test_fallback_insight():
    insight = MarketInsight.fallback_insight()
    assert insight.fallback
    assert insight.to_dict() == {
        "sentiment": "Neutral",
        "analysis": "Could not fetch AI analysis at this time.",
        "recommendation": "Monitor global economic indicators.",
        "fallback": True,
    }


class TestClient:

    def test_requires_price(self):
        client = MarketInsightClient(api_key="key")
        with pytest.raises(ValueError):
            client.get_market_insight(0)

    def test_without_key_returns_fallback(self):
        client = MarketInsightClient(api_key="")
        assert not client.enabled
        with patch(GENAI) as genai:
            insight = client.get_market_insight(2_950_000)
        assert insight.fallback
        genai.Client.assert_not_called()

    def test_successful_call(self):
        client = MarketInsightClient(api_key="test-key", model="gemini-test")
        text = '```json\n{"sentiment": "Bearish", "analysis": "Rates up.", "recommendation": "Wait."}\n```'
        genai = _genai_returning(text)

        with patch(GENAI, genai):
            insight = client.get_market_insight(2_950_000)

        assert insight.sentiment is Sentiment.BEARISH
        assert insight.recommendation == "Wait."
        genai.Client.assert_called_once_with(api_key="test-key")
        kwargs = genai.Client.return_value.models.generate_content.call_args[1]
        assert kwargs["model"] == "gemini-test"
        assert "IDR 2.950.000" in kwargs["contents"]
        assert kwargs["config"]["response_mime_type"] == "application/json"

    def test_requests_structured_output_without_token_cap(self):
        client = MarketInsightClient(api_key="test-key")
        genai = _genai_returning(
            '{"sentiment": "Neutral", "analysis": "Flat.", "recommendation": "Hold."}'
        )

        with patch(GENAI, genai):
            client.get_market_insight(2_950_000)

        config = genai.Client.return_value.models.generate_content.call_args[1]["config"]
        schema = config["response_schema"]
        assert schema["type"] == "OBJECT"
        assert schema["required"] == ["sentiment", "analysis", "recommendation"]
        assert all(
            schema["properties"][field] == {"type": "STRING"}
            for field in ("sentiment", "analysis", "recommendation")
        )
        assert "max_output_tokens" not in config

    def test_api_error_returns_fallback(self):
        client = MarketInsightClient(api_key="test-key")
        genai = Mock()
        genai.Client.return_value.models.generate_content.side_effect = RuntimeError("quota")

        with patch(GENAI, genai):
            insight = client.get_market_insight(2_950_000)

        assert insight.fallback
        assert insight.sentiment is Sentiment.NEUTRAL

    def test_malformed_reply_returns_fallback(self):
        client = MarketInsightClient(api_key="test-key")
        with patch(GENAI, _genai_returning("not json")):
            assert client.get_market_insight(2_950_000).fallback
