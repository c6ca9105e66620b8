"""Unit tests for the response scan."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from invitation_sequencer.collaborators.classifier import (
    ClassificationResult,
    KeywordClassifier,
    ResponseClassifier,
)
from invitation_sequencer.collaborators.inbox import InboundMessage, ResponseSource
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.scanner import ResponseScanner, ScanOutcomeKind
from invitation_sequencer.sequencing.sequencer import Sequencer
from invitation_sequencer.sequencing.state_machine import (
    InvitationStatus,
    ResponseClassification,
)


class DictSource:
    """Replies keyed by participant id; a value that is an exception is raised."""

    def __init__(self, replies: dict[str, object]) -> None:
        self.replies = replies

    def latest_response(self, participant: Participant) -> InboundMessage | None:
        reply = self.replies.get(participant.id)
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            return None
        return InboundMessage(
            sender=participant.email or "",
            body=str(reply),
            thread_id=f"thread-{participant.id}",
            received_at=datetime(2026, 2, 11, tzinfo=UTC),
        )


@pytest.fixture
def sent_chain(sequencer: Sequencer) -> Sequencer:
    for pid in ("a", "b", "c"):
        sequencer.update_participant(pid, email=f"{pid}@example.org")
        sequencer.set_status(pid, "sent")
    return sequencer


def test_confirmation_applies_and_unlocks(sent_chain: Sequencer) -> None:
    sent_chain.set_status("b", "confirmed")
    sent_chain.set_status("c", "not_started")
    scanner = ResponseScanner(sent_chain, DictSource({"a": "Count me in"}), KeywordClassifier())

    report = scanner.scan()

    [applied] = [o for o in report.outcomes if o.kind is ScanOutcomeKind.APPLIED]
    assert applied.participant_id == "a"
    assert applied.classification is ResponseClassification.CONFIRMED
    assert applied.unlocked == ("c",)
    participant = sent_chain.get_participant("a")
    assert participant.status is InvitationStatus.CONFIRMED
    assert participant.email_thread_id == "thread-a"
    assert participant.last_response_snippet == "Count me in"


def test_only_sent_participants_with_email_are_scanned(sequencer: Sequencer) -> None:
    sequencer.set_status("a", "sent")
    sequencer.update_participant("b", email="b@example.org")
    source = Mock(spec=ResponseSource)
    source.latest_response.return_value = None

    report = ResponseScanner(sequencer, source, KeywordClassifier()).scan()

    assert report.outcomes == ()
    source.latest_response.assert_not_called()


def test_outcomes_per_participant(sent_chain: Sequencer) -> None:
    scanner = ResponseScanner(
        sent_chain,
        DictSource({"a": "Received, thanks.", "b": "Unfortunately I can't"}),
        KeywordClassifier(),
    )

    report = scanner.scan()

    kinds = {o.participant_id: o.kind for o in report.outcomes}
    assert kinds == {
        "a": ScanOutcomeKind.UNCLEAR,
        "b": ScanOutcomeKind.APPLIED,
        "c": ScanOutcomeKind.NO_RESPONSE,
    }
    assert sent_chain.get_participant("a").status is InvitationStatus.SENT
    assert sent_chain.get_participant("b").status is InvitationStatus.DECLINED
    assert report.found == 1
    assert report.summary()["no_response"] == 1


def test_low_confidence_is_held(sent_chain: Sequencer) -> None:
    classifier = Mock(spec=ResponseClassifier)
    classifier.classify.return_value = ClassificationResult(
        classification=ResponseClassification.CONFIRMED, confidence=0.4
    )
    scanner = ResponseScanner(
        sent_chain, DictSource({"a": "maybe?"}), classifier, min_confidence=0.6
    )

    outcome = scanner.scan_one(sent_chain.get_participant("a"))

    assert outcome.kind is ScanOutcomeKind.HELD
    assert outcome.confidence == 0.4
    assert sent_chain.get_participant("a").status is InvitationStatus.SENT


def test_failure_is_isolated(sent_chain: Sequencer) -> None:
    scanner = ResponseScanner(
        sent_chain,
        DictSource({"a": RuntimeError("mailbox unavailable"), "b": "Count me in"}),
        KeywordClassifier(),
    )

    report = scanner.scan()

    [failure] = report.failures
    assert failure.participant_id == "a"
    assert failure.error == "mailbox unavailable"
    assert sent_chain.get_participant("b").status is InvitationStatus.CONFIRMED
    assert report.found == 1
