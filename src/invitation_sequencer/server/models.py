"""Request and response bodies for the REST API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from invitation_sequencer.sequencing.events import AutomationEvent, EventKind
from invitation_sequencer.sequencing.participants import Participant
from invitation_sequencer.sequencing.state_machine import (
    InvitationStatus,
    ResponseClassification,
)


class ApiParticipant(Participant):
    deps_met: bool
    blocking: list[str] = Field(default_factory=list)


class StatusChangeRequest(BaseModel):
    status: InvitationStatus
    description: str | None = None


class ClassifyRequest(BaseModel):
    classification: ResponseClassification
    snippet: str = ""


class ClassifyTextRequest(BaseModel):
    body: str = Field(min_length=1)


class NewEventRequest(BaseModel):
    kind: EventKind
    participant_id: str
    description: str = ""
    requires_action: bool = False
    action_label: str | None = None
    # Kind-specific fields, e.g. {"classification": "confirmed"} for response_detected.
    details: dict[str, Any] = Field(default_factory=dict)


class TransitionResponse(BaseModel):
    applied: bool
    participant: ApiParticipant
    events: list[AutomationEvent] = Field(default_factory=list)
    unlocked: list[str] = Field(default_factory=list)


class ApiProgress(BaseModel):
    key: Literal["phase", "panel"]
    value: str
    label: str
    total: int
    confirmed: int
    sent: int
    declined: int
    in_progress: int
    not_started: int
    fill_percent: int


class ApproveRequest(BaseModel):
    # Replaces the draft text before approval when given.
    body: str | None = None


class SendRequest(BaseModel):
    to: str | None = None
    subject: str | None = None
    body: str | None = None


class DraftResponse(BaseModel):
    subject: str
    body: str
    result: TransitionResponse
