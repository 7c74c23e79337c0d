"""Tests for topic drift detection."""

from __future__ import annotations

import asyncio

import pytest
from fakes import FakeBackend

from talkadvantage.analysis.drift import detect_topic_drift, parse_drift_reply
from talkadvantage.llm.client import CompletionClient
from talkadvantage.llm.models import Ok, ParseError, UpstreamCallError


class TestParseDriftReply:
    def test_true(self) -> None:
        assert parse_drift_reply('{"hasDrifted": true}') is True

    def test_false(self) -> None:
        assert parse_drift_reply('{"hasDrifted": false}') is False

    def test_fenced_json(self) -> None:
        assert parse_drift_reply('```json\n{"hasDrifted": true}\n```') is True

    def test_missing_key_defaults_to_false(self) -> None:
        assert parse_drift_reply("{}") is False

    def test_empty_reply_is_false(self) -> None:
        assert parse_drift_reply("   ") is False

    def test_null_flag_is_false(self) -> None:
        assert parse_drift_reply('{"hasDrifted": null}') is False

    @pytest.mark.parametrize("reply", ["[]", "true", "42", '"drifted"'])
    def test_non_object_json_is_false(self, reply: str) -> None:
        assert parse_drift_reply(reply) is False

    def test_string_flag_is_coerced(self) -> None:
        assert parse_drift_reply('{"hasDrifted": "yes"}') is True

    def test_non_boolean_flag_raises(self) -> None:
        with pytest.raises(UpstreamCallError, match="Unparseable"):
            parse_drift_reply('{"hasDrifted": [1, 2]}')

    def test_not_json_raises(self) -> None:
        with pytest.raises(UpstreamCallError) as excinfo:
            parse_drift_reply("Yes, the topic drifted.")
        assert isinstance(excinfo.value.result, ParseError)
        assert excinfo.value.result.raw == "Yes, the topic drifted."


class TestDetectTopicDrift:
    def test_prompt_and_options(self) -> None:
        backend = FakeBackend(lambda _: Ok('{"hasDrifted": true}'))
        drifted = asyncio.run(
            detect_topic_drift(
                CompletionClient(backend),
                "We need to fix the budget.",
                "Did anyone watch the game?",
                0.6,
                model="anthropic/claude-3-opus-20240229",
            )
        )
        assert drifted is True
        call = backend.calls[0]
        assert 'Previous thought: "We need to fix the budget."' in call.prompt
        assert 'Current thought: "Did anyone watch the game?"' in call.prompt
        assert "Drift threshold: 0.6" in call.prompt
        assert '{"hasDrifted": true}' in call.prompt
        assert call.model == "anthropic/claude-3-opus-20240229"
        assert call.temperature == 0.3
        assert call.max_tokens == 100
