"""Unit tests for response classification collaborators."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from invitation_sequencer.collaborators.classifier import (
    KeywordClassifier,
    LLMResponseClassifier,
    build_classifier,
    parse_verdict,
)
from invitation_sequencer.collaborators.provider import LLMProvider
from invitation_sequencer.sequencing.state_machine import ResponseClassification


@pytest.mark.parametrize(
    ("body", "expected", "confidence"),
    [
        ("Count me in, see you in Houston.", ResponseClassification.CONFIRMED, 0.7),
        ("I regret I won't be able to attend.", ResponseClassification.DECLINED, 0.7),
        ("Could we hop on a call next week?", ResponseClassification.MEETING_REQUESTED, 0.6),
        ("Can you share the agenda?", ResponseClassification.MORE_INFO, 0.6),
        ("Received, thank you.", ResponseClassification.UNCLEAR, 0.3),
    ],
)
def test_keyword_classifier(
    body: str, expected: ResponseClassification, confidence: float
) -> None:
    result = KeywordClassifier().classify(body, "Someone")
    assert result.classification is expected
    assert result.confidence == confidence


def test_keyword_precedence_confirm_beats_decline() -> None:
    # "looking forward" (confirm) wins over "conflict" (decline).
    body = "Looking forward to it, though I have a conflict on Tuesday."
    assert KeywordClassifier().classify(body).classification is ResponseClassification.CONFIRMED


def test_keyword_handles_curly_apostrophes() -> None:
    result = KeywordClassifier().classify("I can’t make it this time.")
    assert result.classification is ResponseClassification.DECLINED


def test_parse_verdict_variants() -> None:
    verdict = parse_verdict('{"classification": "declined", "confidence": 0.9}')
    assert (verdict.classification, verdict.confidence) == (ResponseClassification.DECLINED, 0.9)

    fenced = parse_verdict('```json\n{"classification": "more_info"}\n```')
    assert fenced.classification is ResponseClassification.MORE_INFO
    assert fenced.confidence == 0.5

    with pytest.raises(ValueError):
        parse_verdict("[1, 2]")


def test_llm_classifier_uses_provider_verdict() -> None:
    provider = Mock(spec=LLMProvider)
    provider.chat.return_value = '{"classification": "meeting_requested", "confidence": 0.8}'

    result = LLMResponseClassifier(provider).classify("Let's find a time", "Tim Latimer")

    assert result.classification is ResponseClassification.MEETING_REQUESTED
    messages = provider.chat.call_args.args[0]
    assert messages[0]["role"] == "system"
    assert "Tim Latimer" in messages[1]["content"]


@pytest.mark.parametrize(
    "reply",
    [
        "not json",
        '{"classification": "perhaps"}',
        '{"classification": "confirmed", "confidence": 7}',
    ],
)
def test_llm_classifier_falls_back_on_bad_output(reply: str) -> None:
    provider = Mock(spec=LLMProvider)
    provider.chat.return_value = reply

    result = LLMResponseClassifier(provider).classify("Count me in", "X")

    assert result.classification is ResponseClassification.CONFIRMED
    assert result.confidence == 0.7


def test_llm_classifier_falls_back_on_provider_error() -> None:
    provider = Mock(spec=LLMProvider)
    provider.chat.side_effect = RuntimeError("network down")

    result = LLMResponseClassifier(provider).classify("Unfortunately no", "X")

    assert result.classification is ResponseClassification.DECLINED


def test_build_classifier() -> None:
    assert isinstance(build_classifier(None, campaign_name="X"), KeywordClassifier)
    assert isinstance(
        build_classifier(Mock(spec=LLMProvider), campaign_name="X"), LLMResponseClassifier
    )
