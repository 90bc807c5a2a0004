"""Tests for the advisory prompts and the Messages API client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import httpx

from advisor import (
    FALLBACK_VERDICT,
    AnthropicAdvisor,
    build_system_prompt,
    build_user_prompt,
    search_context,
)

TECHNICALS = {
    "price": 187.5,
    "change": 12.4,
    "high": 190.0,
    "low": 180.25,
    "volume": 51234567,
    "gap": 1.23456,
    "rsi": 74.86,
}

MESSAGES_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def text_message(*texts):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


def make_advisor(result):
    """Advisor wired to a fake SDK client whose messages.create returns or raises `result`."""
    client = SimpleNamespace(messages=MagicMock())
    if isinstance(result, Exception):
        client.messages.create.side_effect = result
    else:
        client.messages.create.return_value = result
    return AnthropicAdvisor("anthropic-key", model="test-model", client=client), client


class TestSearchContext:
    def test_placeholder_shape(self):
        ctx = search_context("TSLA stock news")
        assert ctx["query"] == "TSLA stock news"
        assert ctx["results"] == [
            {"title": "Recent news placeholder", "snippet": "Search results would appear here"}
        ]


class TestPrompts:
    """Tests for prompt construction."""

    def test_system_prompt_embeds_numbers(self):
        prompt = build_system_prompt("TSLA", TECHNICALS)
        assert "Analyze ONLY TSLA" in prompt
        assert "Price $187.5, Change 12.4%, RSI 74.9" in prompt
        assert "BURRY SHORT" in prompt
        assert "PENGUIN LONG" in prompt
        assert "EXACTLY 2 SENTENCES" in prompt

    def test_system_prompt_without_rsi(self):
        prompt = build_system_prompt("TSLA", {"price": 10})
        assert "RSI N/A" in prompt

    def test_user_prompt_snapshot(self):
        prompt = build_user_prompt("TSLA", "Tesla", search_context("q"), TECHNICALS)
        assert prompt.startswith("STOCK: TSLA (Tesla)")
        assert "Volume: 51,234,567" in prompt
        assert "Day Range: $180.25 - $190.0" in prompt
        assert "Gap: 1.23%" in prompt
        assert "Recent news placeholder" in prompt
        assert "PREVIOUS ANALYSIS" not in prompt
        assert prompt.endswith("What's the play?")

    def test_user_prompt_includes_history(self):
        history = [{"verdict": "HOLD - no setup.", "created_at": "2026-10-18 14:00:00"}]
        prompt = build_user_prompt("TSLA", "Tesla", search_context("q"), TECHNICALS, history)
        assert "PREVIOUS ANALYSIS" in prompt
        assert "HOLD - no setup." in prompt


class TestAnthropicAdvisor:
    """Tests for AnthropicAdvisor.ask."""

    def test_returns_first_text_block(self):
        advisor, client = make_advisor(text_message("TSLA shows a Burry setup. SHORT.", "ignored"))

        verdict = advisor.ask("TSLA", "Tesla", search_context("q"), TECHNICALS, [])

        assert verdict == "TSLA shows a Burry setup. SHORT."
        client.messages.create.assert_called_once()
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 250
        assert "Penguin-Burry" in kwargs["system"]
        assert kwargs["messages"][0]["role"] == "user"
        assert kwargs["messages"][0]["content"].startswith("STOCK: TSLA (Tesla)")

    def test_status_error_falls_back(self):
        error = anthropic.APIStatusError(
            "overloaded", response=httpx.Response(529, request=MESSAGES_REQUEST), body=None
        )
        advisor, _ = make_advisor(error)
        assert advisor.ask("TSLA", "Tesla", {}, TECHNICALS) == FALLBACK_VERDICT

    def test_connection_error_falls_back(self):
        advisor, _ = make_advisor(anthropic.APIConnectionError(request=MESSAGES_REQUEST))
        assert advisor.ask("TSLA", "Tesla", {}) == FALLBACK_VERDICT

    def test_empty_content_falls_back(self):
        advisor, _ = make_advisor(SimpleNamespace(content=[]))
        assert advisor.ask("TSLA", "Tesla", {}, TECHNICALS) == FALLBACK_VERDICT

    def test_non_text_block_falls_back(self):
        tool_use = SimpleNamespace(content=[SimpleNamespace(type="tool_use", id="tu_1", name="search", input={})])
        advisor, _ = make_advisor(tool_use)
        assert advisor.ask("TSLA", "Tesla", {}, TECHNICALS) == FALLBACK_VERDICT

    def test_default_client_does_not_retry(self):
        advisor = AnthropicAdvisor("anthropic-key")
        assert isinstance(advisor.client, anthropic.Anthropic)
        assert advisor.client.max_retries == 0
