"""Periodic response scan across participants awaiting a reply.

Each participant is scanned independently and produces exactly one
:class:`ScanOutcome`. A failure fetching or classifying one participant's reply
is recorded in that participant's outcome; the scan carries on with the rest.

Fetching and classification run outside the sequencer lock. Only the final
``classify_response`` call (and the thread-id update) go through the engine.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from invitation_sequencer.collaborators.classifier import ClassificationResult, ResponseClassifier
from invitation_sequencer.collaborators.inbox import ResponseSource
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.sequencer import Sequencer
from invitation_sequencer.sequencing.state_machine import (
    SENT_STATUSES,
    ResponseClassification,
)

logger = logging.getLogger(__name__)


class ScanOutcomeKind(str, Enum):
    APPLIED = "applied"
    NO_RESPONSE = "no_response"
    UNCLEAR = "unclear"
    HELD = "held"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ScanOutcome:
    participant_id: str
    kind: ScanOutcomeKind
    classification: ResponseClassification | None = None
    confidence: float | None = None
    unlocked: tuple[str, ...] = ()
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ScanReport:
    outcomes: tuple[ScanOutcome, ...] = field(default=())

    def count(self, kind: ScanOutcomeKind) -> int:
        return sum(1 for o in self.outcomes if o.kind is kind)

    @property
    def found(self) -> int:
        return self.count(ScanOutcomeKind.APPLIED)

    @property
    def failures(self) -> list[ScanOutcome]:
        return [o for o in self.outcomes if o.kind is ScanOutcomeKind.FAILED]

    def summary(self) -> dict[str, int]:
        counts = Counter(o.kind.value for o in self.outcomes)
        return {kind.value: counts.get(kind.value, 0) for kind in ScanOutcomeKind}


def awaiting_response(participant: Participant) -> bool:
    return participant.status in SENT_STATUSES and bool(participant.email)


class ResponseScanner:
    def __init__(
        self,
        sequencer: Sequencer,
        source: ResponseSource,
        classifier: ResponseClassifier,
        *,
        min_confidence: float = 0.0,
    ) -> None:
        self._sequencer = sequencer
        self._source = source
        self._classifier = classifier
        self._min_confidence = min_confidence

    def scan(self) -> ScanReport:
        candidates = [p for p in self._sequencer.participants() if awaiting_response(p)]
        outcomes = tuple(self.scan_one(p) for p in candidates)
        report = ScanReport(outcomes)
        logger.info(
            "Response scan complete", extra={"scanned": len(outcomes), **report.summary()}
        )
        return report

    def scan_one(self, participant: Participant) -> ScanOutcome:
        try:
            message = self._source.latest_response(participant)
            if message is None:
                return ScanOutcome(participant.id, ScanOutcomeKind.NO_RESPONSE)

            if message.thread_id and message.thread_id != participant.email_thread_id:
                self._sequencer.update_participant(
                    participant.id, email_thread_id=message.thread_id
                )

            result: ClassificationResult = self._classifier.classify(message.body, participant.name)
            if result.classification is ResponseClassification.UNCLEAR:
                return ScanOutcome(
                    participant.id,
                    ScanOutcomeKind.UNCLEAR,
                    classification=result.classification,
                    confidence=result.confidence,
                )
            if result.confidence < self._min_confidence:
                logger.info(
                    "Classification held for review",
                    extra={
                        "participant_id": participant.id,
                        "classification": result.classification.value,
                        "confidence": result.confidence,
                    },
                )
                return ScanOutcome(
                    participant.id,
                    ScanOutcomeKind.HELD,
                    classification=result.classification,
                    confidence=result.confidence,
                )

            applied = self._sequencer.classify_response(
                participant.id, result.classification, message.preview
            )
            return ScanOutcome(
                participant.id,
                ScanOutcomeKind.APPLIED,
                classification=result.classification,
                confidence=result.confidence,
                unlocked=tuple(p.id for p in applied.unlocked),
            )
        except Exception as e:
            logger.exception(
                "Response scan failed for participant",
                extra={"participant_id": participant.id},
            )
            return ScanOutcome(
                participant.id, ScanOutcomeKind.FAILED, error=str(e) or type(e).__name__
            )
