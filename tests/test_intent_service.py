"""Tests for language-model meal parsing."""

import asyncio
import json

import pytest

from macro_estimator.errors import MalformedResponseError, RateLimitedError, UpstreamError
from macro_estimator.services.intent import IntentParser
from tests.conftest import FakeLanguageModelClient, intent_payload


def test_parse_intent_returns_items() -> None:
    llm = FakeLanguageModelClient(text=intent_payload(("oatmeal", 40), ("banana", 118)))
    parser = IntentParser(client=llm)

    items = asyncio.run(parser.parse_intent("oatmeal with a banana"))

    assert [item.search_term for item in items] == ["oatmeal", "banana"]
    assert items[1].estimated_weight_grams == 118
    assert '"oatmeal with a banana"' in llm.prompts[0]
    assert llm.images == [None]


def test_parse_intent_strips_markdown_fences() -> None:
    fenced = "```json\n" + intent_payload(("rice", 150)) + "\n```"
    parser = IntentParser(client=FakeLanguageModelClient(text=fenced))

    items = asyncio.run(parser.parse_intent("a bowl of rice"))

    assert items[0].search_term == "rice"


def test_parse_intent_rate_limited_is_empty() -> None:
    llm = FakeLanguageModelClient(error=RateLimitedError("quota", status_code=429))
    parser = IntentParser(client=llm)

    assert asyncio.run(parser.parse_intent("toast")) == []


def test_parse_intent_propagates_upstream_error() -> None:
    llm = FakeLanguageModelClient(error=UpstreamError("model overloaded", status_code=503))
    parser = IntentParser(client=llm)

    with pytest.raises(UpstreamError, match="model overloaded"):
        asyncio.run(parser.parse_intent("toast"))


def test_parse_intent_rejects_non_json() -> None:
    parser = IntentParser(client=FakeLanguageModelClient(text="I think it is toast."))

    with pytest.raises(MalformedResponseError):
        asyncio.run(parser.parse_intent("toast"))


def test_parse_intent_rejects_wrong_schema() -> None:
    text = json.dumps({"items": [{"estimated_weight_grams": 10}]})
    parser = IntentParser(client=FakeLanguageModelClient(text=text))

    with pytest.raises(MalformedResponseError):
        asyncio.run(parser.parse_intent("toast"))


def test_parse_intent_drops_blank_terms() -> None:
    llm = FakeLanguageModelClient(text=intent_payload(("  ", 10), ("toast", 30)))
    parser = IntentParser(client=llm)

    items = asyncio.run(parser.parse_intent("toast"))

    assert [item.search_term for item in items] == ["toast"]


def test_analyze_meal_returns_model_totals() -> None:
    text = json.dumps(
        {
            "summary": "Chicken and rice",
            "total_calories": 520,
            "total_protein": 42,
            "total_carbs": 55,
            "total_fat": 12,
            "items": [
                {"name": "chicken breast", "estimated_calories": 280},
                {"name": "white rice", "estimated_calories": 240},
            ],
        }
    )
    parser = IntentParser(client=FakeLanguageModelClient(text=f"```json{text}```"))

    analysis = asyncio.run(parser.analyze_meal("chicken and rice"))

    assert analysis.summary == "Chicken and rice"
    assert analysis.total_calories == 520
    assert len(analysis.items) == 2


def test_analyze_meal_rate_limit_is_raised() -> None:
    llm = FakeLanguageModelClient(error=RateLimitedError("quota", status_code=429))
    parser = IntentParser(client=llm)

    with pytest.raises(RateLimitedError):
        asyncio.run(parser.analyze_meal("toast"))
