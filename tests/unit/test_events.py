"""Unit tests for the append-only automation event log."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from invitation_sequencer.errors import InvalidEventError, UnknownEventError
from invitation_sequencer.sequencing.events import (
    DependencyUnlockedEvent,
    EventKind,
    EventLog,
    ResponseDetectedEvent,
    StatusChangedEvent,
    automation_event_adapter,
)
from invitation_sequencer.sequencing.sequencer import Sequencer


def test_append_assigns_ids_and_timestamps(clock) -> None:
    log = EventLog(clock=clock)
    first = log.append(EventKind.STATUS_CHANGED, participant_id="a", to_status="sent")
    second = log.append("dependency_unlocked", participant_id="b", requires_action=True)

    assert isinstance(first, StatusChangedEvent)
    assert isinstance(second, DependencyUnlockedEvent)
    assert first.id != second.id
    assert first.id.startswith("evt-")
    assert second.timestamp > first.timestamp
    assert [e.id for e in log.all()] == [first.id, second.id]


def test_no_deduplication(clock) -> None:
    log = EventLog(clock=clock)
    for _ in range(3):
        log.append(
            EventKind.RESPONSE_DETECTED, participant_id="a", classification="more_info"
        )
    assert len(log.for_participant("a")) == 3


def test_dismiss_keeps_record(clock) -> None:
    log = EventLog(clock=clock)
    event = log.append(
        EventKind.DEPENDENCY_UNLOCKED,
        participant_id="b",
        requires_action=True,
        action_label="Generate draft",
    )
    assert log.pending_actions() == [event]

    dismissed = log.dismiss(event.id)

    assert dismissed.requires_action is False
    assert dismissed.description == event.description
    assert dismissed.timestamp == event.timestamp
    assert log.pending_actions() == []
    assert log.get(event.id) == dismissed
    assert len(log) == 1


def test_events_are_frozen(clock) -> None:
    log = EventLog(clock=clock)
    event = log.append(EventKind.DRAFT_GENERATED, participant_id="a", subject="Hi")
    with pytest.raises(ValidationError):
        event.description = "changed"  # type: ignore[misc]


def test_unknown_event_lookups(clock) -> None:
    log = EventLog(clock=clock)
    with pytest.raises(UnknownEventError):
        log.get("evt-missing")
    with pytest.raises(UnknownEventError):
        log.dismiss("evt-missing")


def test_discriminated_union_roundtrip(clock) -> None:
    log = EventLog(clock=clock)
    event = log.append(
        EventKind.RESPONSE_DETECTED,
        participant_id="a",
        classification="meeting_requested",
        snippet="Can we talk?",
        requires_action=True,
        action_label="Schedule meeting",
    )
    restored = automation_event_adapter.validate_json(automation_event_adapter.dump_json(event))
    assert isinstance(restored, ResponseDetectedEvent)
    assert restored == event


def test_sequencer_dismiss_and_pending(sequencer: Sequencer) -> None:
    result = sequencer.classify_response("a", "more_info", "Who else is coming?")
    event = result.events[0]
    assert event.requires_action is True
    assert event.action_label == "Draft follow-up"
    assert sequencer.get_pending_actions() == [event]

    sequencer.dismiss_event(event.id)

    assert sequencer.get_pending_actions() == []
    assert sequencer.get_event(event.id).requires_action is False
    assert len(sequencer.events()) == 1


def test_sequencer_add_event(sequencer: Sequencer) -> None:
    event = sequencer.add_event(
        EventKind.FOLLOW_UP_GENERATED, "b", description="Follow-up drafted", subject="Re: hi"
    )
    assert event.participant_name == "B Person"
    assert sequencer.events("b") == [event]


@pytest.mark.parametrize("field", ["id", "timestamp", "kind", "participant_id"])
def test_sequencer_add_event_rejects_log_assigned_fields(
    sequencer: Sequencer, field: str
) -> None:
    with pytest.raises(InvalidEventError, match=field):
        sequencer.add_event("status_changed", "a", **{field: "custom"})

    assert sequencer.events() == []
    assert sequencer.revision == 0
