"""Response classification collaborators.

:class:`KeywordClassifier` is deterministic and network-free. The LLM-backed
classifier asks a provider for a JSON verdict and falls back to the keyword
classifier on any failure, so classification never raises for bad model output.
"""

from __future__ import annotations

import json
import logging
from typing import Protocol

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from invitation_sequencer.collaborators.provider import LLMProvider
from invitation_sequencer.sequencing.state_machine import ResponseClassification

logger = logging.getLogger(__name__)


class ClassificationResult(BaseModel):
    classification: ResponseClassification
    confidence: float = Field(ge=0.0, le=1.0)


class ResponseClassifier(Protocol):
    def classify(self, body: str, participant_name: str) -> ClassificationResult: ...


CONFIRM_PATTERNS: tuple[str, ...] = (
    "confirm",
    "happy to join",
    "count me in",
    "looking forward",
    "i accept",
    "i'll be there",
    "yes",
    "absolutely",
    "delighted to",
    "pleased to accept",
)
DECLINE_PATTERNS: tuple[str, ...] = (
    "decline",
    "unable to",
    "can't make",
    "regret",
    "not available",
    "unfortunately",
    "won't be able",
    "conflict",
    "pass on this",
)
MORE_INFO_PATTERNS: tuple[str, ...] = (
    "more information",
    "more details",
    "tell me more",
    "can you share",
    "what exactly",
    "who else",
    "agenda",
    "specifics",
)
MEETING_PATTERNS: tuple[str, ...] = (
    "let's discuss",
    "schedule a call",
    "can we talk",
    "meet to discuss",
    "hop on a call",
    "let's chat",
    "set up a time",
)

# Checked in order; the first rule with a matching pattern wins.
_KEYWORD_RULES: tuple[tuple[ResponseClassification, tuple[str, ...], float], ...] = (
    (ResponseClassification.CONFIRMED, CONFIRM_PATTERNS, 0.7),
    (ResponseClassification.DECLINED, DECLINE_PATTERNS, 0.7),
    (ResponseClassification.MEETING_REQUESTED, MEETING_PATTERNS, 0.6),
    (ResponseClassification.MORE_INFO, MORE_INFO_PATTERNS, 0.6),
)

UNCLEAR_CONFIDENCE = 0.3


class KeywordClassifier:
    """Substring matching over the lower-cased body."""

    def classify(self, body: str, participant_name: str = "") -> ClassificationResult:
        lower = body.lower().replace("’", "'")
        for classification, patterns, confidence in _KEYWORD_RULES:
            if any(p in lower for p in patterns):
                return ClassificationResult(classification=classification, confidence=confidence)
        return ClassificationResult(
            classification=ResponseClassification.UNCLEAR, confidence=UNCLEAR_CONFIDENCE
        )


CLASSIFIER_SYSTEM_PROMPT = (
    "You classify email responses to event invitations. Respond with ONLY a JSON object: "
    '{"classification": "confirmed"|"declined"|"more_info"|"meeting_requested"|"unclear", '
    '"confidence": 0.0-1.0}'
)


def parse_verdict(text: str) -> ClassificationResult:
    """Parse a model verdict. Missing fields default to unclear / 0.5."""

    raw = text.strip()
    if raw.startswith("```"):
        raw = raw.strip("`")
        raw = raw.removeprefix("json").strip()
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Classifier verdict is not a JSON object")
    return ClassificationResult(
        classification=data.get("classification") or ResponseClassification.UNCLEAR,
        confidence=data.get("confidence") or 0.5,
    )


class LLMResponseClassifier:
    def __init__(
        self,
        provider: LLMProvider,
        *,
        campaign_name: str = "CERA Week 2026",
        fallback: ResponseClassifier | None = None,
    ) -> None:
        self._provider = provider
        self._campaign_name = campaign_name
        self._fallback = fallback or KeywordClassifier()

    def classify(self, body: str, participant_name: str) -> ClassificationResult:
        messages = [
            {"role": "system", "content": CLASSIFIER_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Classify this response from {participant_name} to a "
                    f"{self._campaign_name} invitation:\n\n{body}"
                ),
            },
        ]
        try:
            text = self._provider.chat(messages, max_tokens=256, temperature=0.0)
            return parse_verdict(text)
        except (ValueError, PydanticValidationError) as e:
            # json.JSONDecodeError is a ValueError.
            logger.warning(
                "Unparseable classifier verdict; using keyword fallback",
                extra={"participant_name": participant_name, "error": str(e)},
            )
        except Exception:
            logger.exception(
                "Classifier provider failed; using keyword fallback",
                extra={"participant_name": participant_name},
            )
        return self._fallback.classify(body, participant_name)


def build_classifier(provider: LLMProvider | None, *, campaign_name: str) -> ResponseClassifier:
    if provider is None:
        return KeywordClassifier()
    return LLMResponseClassifier(provider, campaign_name=campaign_name)
