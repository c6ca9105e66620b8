"""Sequencing engine: entity store, state machine, cascade, event log and queries."""

from invitation_sequencer.sequencing.events import AutomationEvent, EventKind, EventLog
from invitation_sequencer.sequencing.participants import EntityStore, Participant
from invitation_sequencer.sequencing.state_machine import (
    ClassifiedTransition,
    InvitationStatus,
    ManualTransition,
    ResponseClassification,
)

__all__ = [
    "AutomationEvent",
    "ClassifiedTransition",
    "EntityStore",
    "EventKind",
    "EventLog",
    "InvitationStatus",
    "ManualTransition",
    "Participant",
    "ResponseClassification",
]
